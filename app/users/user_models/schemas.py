# app/users/user_models/schemas.py


from app.helpers.time import UTCDateTime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Allowed values as constants
ROLES = Literal["resident", "preceptor", "admin"]


# ✅ Request schema for registration
class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    name: str = Field(..., min_length=1)
    crm: Optional[str] = None
    role: ROLES = "resident"

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("username", mode="before")
    def normalize_username(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Response schema for user info
class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    name: str
    crm: Optional[str] = None
    role: ROLES
    is_active: bool
    last_login: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


# ✅ User login request
class UserLogin(BaseModel):
    username: str
    password: str

    @field_validator("username", mode="before")
    def normalize_username(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Response schema for user login
class UserLoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserResponse


# ✅ Response schema for user logout
class UserLogoutResponse(BaseModel):
    message: str


# ✅ Response schema for token refresh
class UserRefreshResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


# ✅ Request schema for change password (authenticated)
class UserChangePassword(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=100)
