# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

from typing import Optional
from fastapi import Depends, HTTPException, status, Cookie
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.shared.exceptions import Unauthorized
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token
from app.users.security import decode_token

# Security schemes
security_scheme = HTTPBearer(auto_error=False)  # Don't auto-raise for cookie fallback


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    access_token_cookie: Optional[str] = Cookie(None, alias="access_token"),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user with token revocation check.

    Accepts token from EITHER:
    - Authorization: Bearer header
    - httpOnly cookie (for web browsers)

    Validates:
    1. JWT signature and expiry
    2. Token exists in database and is not revoked
    3. User exists and is active

    Raises Unauthorized (401) if any validation fails.
    """
    # Extract token from header or cookie
    if credentials:
        token_string = credentials.credentials
    elif access_token_cookie:
        token_string = access_token_cookie
    else:
        raise Unauthorized("Not authenticated. Provide token in Authorization header or cookie.")

    # 1. Decode JWT (validates signature + expiry)
    payload = decode_token(token_string)
    if not payload or payload.get("type") != "access":
        raise Unauthorized("Invalid or expired access token")

    username = payload.get("sub")
    if not username:
        raise Unauthorized("Token missing user identifier")

    # 2. Revocation check
    token_record = await db.execute(
        select(Token).where(
            and_(
                Token.token_string == token_string,
                Token.token_type == "access"
            )
        )
    )
    token_obj = token_record.scalars().first()
    if not token_obj:
        raise Unauthorized("Token not found. Please log in again.")
    if token_obj.is_revoked:
        raise Unauthorized("Token has been revoked. Please log in again.")

    # 3. Fetch user
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()
    if not user:
        raise Unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


async def get_current_user_id(
    current_user: User = Depends(get_current_user)
) -> int:
    """Just the user ID."""
    return current_user.id


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Require admin role.
    Raises 403 if user is not admin.
    """
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user
