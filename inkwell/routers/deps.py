#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Shared router dependencies: objects wired onto ``app.state`` by ``create_app``."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import Depends, Request

from inkwell.core.config import Settings
from inkwell.core.exceptions import Forbidden
from inkwell.core.security import CurrentUser, can_edit, get_current_user
from inkwell.services.orchestrator import ArticleService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_article_service(request: Request) -> ArticleService:
    return request.app.state.articles


async def require_editor(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Only the creator of an article or an admin may change it."""
    article = await service.get(article_id)
    if not can_edit(article.created_by, user):
        raise Forbidden("Only the creator or an admin can modify this article")
    return user
