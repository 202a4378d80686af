# app/users/auth_routers.py

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.system_models.enums import AuditAction
from app.system_services.audit_service import AuditService
from app.system_services.dependencies import audit_context_from
from app.users.auth_dependencies import get_current_user
from app.users.auth_services import (
    registering_user,
    login_user,
    refresh_access_token,
    logout_user,
    update_password,
)
from app.users.user_models.schemas import (
    UserRegister,
    UserLogin,
    UserResponse,
    UserLoginResponse,
    UserLogoutResponse,
    UserRefreshResponse,
    UserChangePassword,
)
from app.users.user_models.user_model import User

router = APIRouter()


# ============================================================
# ✅ REGISTER
# ============================================================
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    return await registering_user(user_data, db)


# ============================================================
# ✅ AUTHENTICATE USER (LOGIN)
# ============================================================
@router.post("/login", response_model=UserLoginResponse)
async def login(user_data: UserLogin, request: Request, db: AsyncSession = Depends(get_db)) -> UserLoginResponse:
    access_token, refresh_token, user = await login_user(user_data, db)
    await AuditService(db, audit_context_from(request, user.id)).record(AuditAction.LOGIN, "user", user.id)
    return UserLoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


# ============================================================
# ✅ REFRESH TOKEN
# ============================================================
@router.post("/refresh", response_model=UserRefreshResponse)
async def refresh_token(
    refresh_token: str = Body(..., embed=True),
    db: AsyncSession = Depends(get_db)
) -> UserRefreshResponse:
    access_token, new_refresh_token = await refresh_access_token(refresh_token, db)
    return UserRefreshResponse(
        access_token=access_token,
        refresh_token=new_refresh_token,
        token_type="bearer"
    )


# ============================================================
# ✅ LOGOUT USER
# ============================================================
@router.post("/logout", response_model=UserLogoutResponse)
async def logout(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> UserLogoutResponse:
    await logout_user(current_user, db)
    await AuditService(db, audit_context_from(request, current_user.id)).record(
        AuditAction.LOGOUT, "user", current_user.id
    )
    return UserLogoutResponse(message="Successfully logged out of all devices")


# ============================================================
# ✅ CHANGE PASSWORD
# ============================================================
@router.post("/change-password", response_model=UserLogoutResponse)
async def change_password(
    data: UserChangePassword,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> UserLogoutResponse:
    await update_password(current_user, data.current_password, data.new_password, db)
    return UserLogoutResponse(message="Password changed successfully")


# ============================================================
# ✅ CURRENT USER
# ============================================================
@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
