#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Comments router
===============
GET    /api/articles/{id}/comments               — list, oldest first
POST   /api/articles/{id}/comments               — add comment
PUT    /api/articles/{id}/comments/{comment_id}  — edit comment
DELETE /api/articles/{id}/comments/{comment_id}  — delete comment
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status


# -----------------------------------------------------------------------------

from inkwell.schemas import CommentCreate, CommentOut
from inkwell.services.orchestrator import ArticleService
from .deps import get_article_service

router = APIRouter(prefix="/articles/{article_id}/comments", tags=["Comments"])


@router.get("", response_model=list[CommentOut])
async def list_comments_endpoint(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    return await service.list_comments(article_id)


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    article_id: str,
    data: CommentCreate,
    service: ArticleService = Depends(get_article_service),
):
    return await service.add_comment(article_id, data)


@router.put("/{comment_id}", response_model=CommentOut)
async def update_comment_endpoint(
    article_id: str,
    comment_id: str,
    data: CommentCreate,
    service: ArticleService = Depends(get_article_service),
):
    return await service.edit_comment(article_id, comment_id, data)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment_endpoint(
    article_id: str,
    comment_id: str,
    service: ArticleService = Depends(get_article_service),
):
    await service.remove_comment(article_id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
