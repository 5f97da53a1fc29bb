#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Articles router
===============
GET    /api/articles?workspace_id=&search=   — list current versions
POST   /api/articles                         — create article (version 1)
GET    /api/articles/{id}?version=N          — current or a specific version
PUT    /api/articles/{id}                    — save new version
DELETE /api/articles/{id}                    — delete article and its history
GET    /api/articles/{id}/versions           — version list, newest first
GET    /api/articles/{id}/export             — current version as a PDF download
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status


# -----------------------------------------------------------------------------

from inkwell.core.config import Settings
from inkwell.core.security import CurrentUser, get_current_user
from inkwell.schemas import (
    ArticleCreate, ArticleOut, ArticleSummary, ArticleUpdate, VersionSummary,
)
from inkwell.services.orchestrator import ArticleService
from .deps import get_app_settings, get_article_service, require_editor

router = APIRouter(prefix="/articles", tags=["Articles"])


# ── List ──────────────────────────────────────────────────────────────────

@router.get("", response_model=list[ArticleSummary])
async def list_articles_endpoint(
    workspace_id: Optional[str] = Query(default=None, max_length=50),
    search: Optional[str] = Query(default=None, description="Match in current title or content"),
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_app_settings),
):
    return await service.list(workspace_id or settings.default_workspace_id, search)


# ── Create ────────────────────────────────────────────────────────────────

@router.post("", response_model=ArticleOut, status_code=status.HTTP_201_CREATED)
async def create_article_endpoint(
    data: ArticleCreate,
    service: ArticleService = Depends(get_article_service),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await service.create(data, created_by=current_user.id)


# ── Read (current or versioned) ───────────────────────────────────────────

@router.get("/{article_id}", response_model=ArticleOut)
async def get_article_endpoint(
    article_id: str,
    version: Optional[int] = Query(default=None, description="Specific version number"),
    service: ArticleService = Depends(get_article_service),
):
    return await service.get(article_id, version)


@router.get("/{article_id}/versions", response_model=list[VersionSummary])
async def list_versions_endpoint(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    return await service.list_versions(article_id)


# ── Save (new version) ────────────────────────────────────────────────────

@router.put("/{article_id}", response_model=ArticleOut)
async def update_article_endpoint(
    article_id: str,
    data: ArticleUpdate,
    service: ArticleService = Depends(get_article_service),
    _: CurrentUser = Depends(require_editor),
):
    return await service.update(article_id, data)


# ── Delete ────────────────────────────────────────────────────────────────

@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article_endpoint(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
    _: CurrentUser = Depends(require_editor),
):
    await service.delete(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Export ────────────────────────────────────────────────────────────────

@router.get("/{article_id}/export", response_class=Response)
async def export_article_endpoint(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    file_name, pdf = await service.export_pdf(article_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
