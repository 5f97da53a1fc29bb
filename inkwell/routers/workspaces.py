#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Workspaces router
=================
GET    /api/workspaces           — list workspaces with article counts
POST   /api/workspaces           — create workspace  (auth required)
GET    /api/workspaces/{id}      — get workspace
PUT    /api/workspaces/{id}      — rename workspace  (auth required)
DELETE /api/workspaces/{id}      — delete empty workspace  (admin required)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.database import get_db
from inkwell.core.security import CurrentUser, get_current_user, require_admin
from inkwell.models import Workspace
from inkwell.schemas import WorkspaceCreate, WorkspaceOut, WorkspaceUpdate
from inkwell.services.workspace_service import (
    count_articles,
    create_workspace,
    delete_workspace,
    get_workspace,
    list_workspaces,
    rename_workspace,
)

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


def _out(ws: Workspace, article_count: int = 0) -> WorkspaceOut:
    return WorkspaceOut(
        id=ws.id,
        name=ws.name,
        created_at=ws.created_at,
        updated_at=ws.updated_at,
        article_count=article_count,
    )


@router.get("", response_model=list[WorkspaceOut])
async def list_workspaces_endpoint(db: AsyncSession = Depends(get_db)):
    return [_out(ws, count) for ws, count in await list_workspaces(db)]


@router.post("", response_model=WorkspaceOut, status_code=status.HTTP_201_CREATED)
async def create_workspace_endpoint(
    data: WorkspaceCreate,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    ws = await create_workspace(db, data)
    await db.refresh(ws)
    return _out(ws)


@router.get("/{workspace_id}", response_model=WorkspaceOut)
async def get_workspace_endpoint(workspace_id: str, db: AsyncSession = Depends(get_db)):
    ws = await get_workspace(db, workspace_id)
    return _out(ws, await count_articles(db, workspace_id))


@router.put("/{workspace_id}", response_model=WorkspaceOut)
async def rename_workspace_endpoint(
    workspace_id: str,
    data: WorkspaceUpdate,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    ws = await rename_workspace(db, workspace_id, data)
    return _out(ws, await count_articles(db, workspace_id))


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace_endpoint(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    await delete_workspace(db, workspace_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
