#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Security utilities
==================
- Password hashing (bcrypt direct, passlib is incompatible with bcrypt>=4)
- JWT access token creation/verification
- FastAPI dependencies for extracting the current user from the token
- ``can_edit``: admin or original creator

The acting user is rebuilt from token claims only, so authentication never
holds a database connection open for the rest of the request.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt as _bcrypt_lib
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt


# -----------------------------------------------------------------------------

from .config import get_settings
from .exceptions import Forbidden

# --------------------------------------------------------------------------- #
# Password hashing
# --------------------------------------------------------------------------- #

def hash_password(plain: str) -> str:
    return _bcrypt_lib.hashpw(plain.encode("utf-8"), _bcrypt_lib.gensalt()).decode("utf-8")


# -----------------------------------------------------------------------------

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return _bcrypt_lib.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# --------------------------------------------------------------------------- #
# JWT tokens
# --------------------------------------------------------------------------- #

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


@dataclass(frozen=True)
class CurrentUser:
    id: uuid.UUID
    email: str
    is_admin: bool = False


# -----------------------------------------------------------------------------

def create_access_token(subject: str | uuid.UUID, extra: dict | None = None) -> str:
    s = get_settings()
    expire = datetime.now(tz=timezone.utc) + timedelta(minutes=s.access_token_expire_minutes)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "type": "access",
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, s.secret_key, algorithm=s.algorithm)


# -----------------------------------------------------------------------------

def decode_token(token: str) -> dict[str, Any]:
    s = get_settings()
    try:
        payload = jwt.decode(token, s.secret_key, algorithms=[s.algorithm])
    except JWTError:
        raise _credentials_error()
    if payload.get("sub") is None or payload.get("type") != "access":
        raise _credentials_error()
    return payload


# -----------------------------------------------------------------------------

def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_payload(payload: dict[str, Any]) -> CurrentUser:
    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise _credentials_error()
    return CurrentUser(
        id=user_id,
        email=payload.get("email", ""),
        is_admin=bool(payload.get("is_admin", False)),
    )


# --------------------------------------------------------------------------- #
# FastAPI dependencies
# --------------------------------------------------------------------------- #

async def get_current_user(token: str = Depends(_oauth2_scheme)) -> CurrentUser:
    return _user_from_payload(decode_token(token))


# -----------------------------------------------------------------------------

async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise Forbidden("Admin privileges required")
    return user


# -----------------------------------------------------------------------------

def can_edit(created_by: Optional[uuid.UUID], user: Optional[CurrentUser]) -> bool:
    """Admins may edit anything; everyone else only what they created."""
    if user is None:
        return False
    if user.is_admin:
        return True
    if created_by is None:
        return False
    return created_by == user.id


# -----------------------------------------------------------------------------
