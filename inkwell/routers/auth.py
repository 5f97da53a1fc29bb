#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Auth router
===========
POST /api/auth/register   — create account (the first account is an admin)
POST /api/auth/login      — get JWT token (OAuth2 form, username = email)
GET  /api/auth/me         — current user info
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.database import get_db
from inkwell.core.exceptions import ConflictError, UserNotFound
from inkwell.core.security import (
    CurrentUser,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from inkwell.models import User
from inkwell.schemas import TokenResponse, UserOut, UserRegister

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_for(user: User) -> str:
    return create_access_token(
        user.id, extra={"email": user.email, "is_admin": user.is_admin}
    )


# -----------------------------------------------------------------------------

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegister, db: AsyncSession = Depends(get_db)):
    dup = await db.execute(select(User.id).where(User.email == data.email))
    if dup.scalar_one_or_none() is not None:
        raise ConflictError("Email already registered")

    existing = (await db.execute(select(func.count(User.id)))).scalar_one()
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        is_admin=existing == 0,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return TokenResponse(access_token=_token_for(user), user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.email == form.username.strip().lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(form.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    return TokenResponse(access_token=_token_for(user), user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, current_user.id)
    if user is None:
        raise UserNotFound("User no longer exists")
    return UserOut.model_validate(user)
