#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Workspace service — create, read, rename, delete workspaces (tenants).

Deleting is refused while articles still reference the workspace; the
foreign key is ON DELETE RESTRICT as a backstop.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ConflictError, WorkspaceNotFound
from inkwell.models import Article, Workspace
from inkwell.schemas import WorkspaceCreate, WorkspaceUpdate
from .slugs import slugify, with_suffix

logger = logging.getLogger(__name__)

_ID_LENGTH = 50


# -----------------------------------------------------------------------------

async def workspace_exists(db: AsyncSession, workspace_id: str) -> bool:
    result = await db.execute(select(Workspace.id).where(Workspace.id == workspace_id))
    return result.scalar_one_or_none() is not None


# -----------------------------------------------------------------------------

async def get_workspace(db: AsyncSession, workspace_id: str) -> Workspace:
    ws = await db.get(Workspace, workspace_id)
    if ws is None:
        raise WorkspaceNotFound(f"Workspace '{workspace_id}' not found")
    return ws


# -----------------------------------------------------------------------------

async def count_articles(db: AsyncSession, workspace_id: str) -> int:
    result = await db.execute(
        select(func.count(Article.id)).where(Article.workspace_id == workspace_id)
    )
    return result.scalar_one()


# -----------------------------------------------------------------------------

async def list_workspaces(db: AsyncSession) -> list[tuple[Workspace, int]]:
    result = await db.execute(
        select(Workspace, func.count(Article.id).label("article_count"))
        .outerjoin(Article, Article.workspace_id == Workspace.id)
        .group_by(Workspace.id)
        .order_by(Workspace.created_at)
    )
    return [(ws, count) for ws, count in result.all()]


# -----------------------------------------------------------------------------

async def create_workspace(db: AsyncSession, data: WorkspaceCreate) -> Workspace:
    base = (data.id or slugify(data.name, _ID_LENGTH) or "workspace")[:_ID_LENGTH]

    # First free id among base, base-2, base-3, ...
    n = 1
    while await workspace_exists(db, with_suffix(base, n, _ID_LENGTH)):
        n += 1
    workspace_id = with_suffix(base, n, _ID_LENGTH)

    ws = Workspace(id=workspace_id, name=data.name)
    db.add(ws)
    await db.flush()
    logger.info("Created workspace %s", workspace_id)
    return ws


# -----------------------------------------------------------------------------

async def rename_workspace(db: AsyncSession, workspace_id: str, data: WorkspaceUpdate) -> Workspace:
    ws = await get_workspace(db, workspace_id)
    ws.name = data.name
    await db.flush()
    await db.refresh(ws)
    return ws


# -----------------------------------------------------------------------------

async def delete_workspace(db: AsyncSession, workspace_id: str) -> None:
    ws = await get_workspace(db, workspace_id)
    if await count_articles(db, workspace_id):
        raise ConflictError(f"Workspace '{workspace_id}' still has articles")
    await db.delete(ws)
    await db.flush()


# -----------------------------------------------------------------------------

async def ensure_default(db: AsyncSession, workspace_id: str, name: str) -> Workspace:
    ws = await db.get(Workspace, workspace_id)
    if ws is not None:
        return ws
    ws = Workspace(id=workspace_id, name=name)
    db.add(ws)
    await db.flush()
    logger.info("Created default workspace %s", workspace_id)
    return ws


# -----------------------------------------------------------------------------
