# app/users/auth_services.py
from fastapi import HTTPException, status
from sqlalchemy import or_, update
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.helpers.time import utcnow
from app.shared.exceptions import Unauthorized, ValidationError
from app.users.user_models.schemas import UserLogin, UserRegister
from app.users.user_models.user_model import User
from app.users.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from app.users.auth_token_model.token_model import Token


def _claims(user: User) -> dict:
    return {"sub": user.username, "user_id": user.id, "role": user.role}


# ============================================================
# ✅ REGISTER A NEW USER
# ============================================================
async def registering_user(user_data: UserRegister, db: AsyncSession) -> User:
    result = await db.execute(
        select(User).where(or_(User.username == user_data.username, User.email == user_data.email))
    )
    existing_user = result.scalars().first()
    if existing_user:
        field = "username" if existing_user.username == user_data.username else "email"
        raise ValidationError(f"User with this {field} already exists", field=field)

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        name=user_data.name,
        crm=user_data.crm,
        role=user_data.role,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    return new_user


# ============================================================
# ✅ AUTHENTICATE USER
# ============================================================
async def authenticate_user(
    username: str, password: str, db: AsyncSession
) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


# ============================================================
# ✅ LOGIN USER
# ============================================================
async def login_user(user_data: UserLogin, db: AsyncSession) -> tuple[str, str, User]:
    user = await authenticate_user(user_data.username, user_data.password, db)
    if not user:
        raise Unauthorized("Incorrect username or password")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    user.last_login = utcnow()
    access_token = await create_access_token(data=_claims(user), db=db)
    refresh_token = await create_refresh_token(data=_claims(user), db=db)

    return access_token, refresh_token, user


# ============================================================
# ✅ REFRESH ACCESS TOKEN
# ============================================================
async def refresh_access_token(
    refresh_token: str, db: AsyncSession
) -> tuple[str, str]:
    payload = decode_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise Unauthorized("Invalid refresh token")

    username = payload.get("sub")
    if not username:
        raise Unauthorized("Invalid refresh token payload")

    result = await db.execute(select(Token).where(Token.token_string == refresh_token))
    stored_token = result.scalars().first()
    if not stored_token or stored_token.is_revoked:
        raise Unauthorized("Refresh token revoked or invalid")

    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()
    if not user or not user.is_active:
        raise Unauthorized("User inactive or not found")

    # Rotate: the old refresh token is single use
    stored_token.is_revoked = True
    access_token = await create_access_token(data=_claims(user), db=db)
    new_refresh_token = await create_refresh_token(data=_claims(user), db=db)

    return access_token, new_refresh_token


# ============================================================
# ✅ LOGOUT USER (Global Revocation)
# ============================================================
async def logout_user(user: User, db: AsyncSession) -> None:
    """Revoke every access and refresh token of this user."""
    await db.execute(
        update(Token)
        .where(Token.user_id == user.id)
        .values(is_revoked=True)
    )
    await db.commit()


# ============================================================
# ✅ CHANGE/UPDATE PASSWORD
# ============================================================
async def update_password(
    user: User, current_password: str, new_password: str, db: AsyncSession
) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise ValidationError("Incorrect current password", field="current_password")

    user.hashed_password = get_password_hash(new_password)
    db.add(user)
    await db.commit()
