#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Users router (admin only)
=========================
GET   /api/users              — list accounts
PATCH /api/users/{id}/role    — promote / demote
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.database import get_db
from inkwell.core.exceptions import UserNotFound, ValidationError
from inkwell.core.security import CurrentUser, require_admin
from inkwell.models import User
from inkwell.schemas import RoleUpdate, UserOut

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    result = await db.execute(select(User).order_by(User.created_at))
    return [UserOut.model_validate(u) for u in result.scalars().all()]


@router.patch("/{user_id}/role", response_model=UserOut)
async def update_role(
    user_id: uuid.UUID,
    data: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    if user_id == admin.id:
        raise ValidationError("You cannot change your own role")
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFound(f"User '{user_id}' not found")
    user.is_admin = data.role == "admin"
    await db.flush()
    await db.refresh(user)
    return UserOut.model_validate(user)
