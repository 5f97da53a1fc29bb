#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Comment service — flat CRUD keyed by (article_id, comment_id).
Comments are not versioned and are returned oldest first.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ArticleNotFound, CommentNotFound
from inkwell.models import Article, Comment
from inkwell.schemas import CommentCreate


# -----------------------------------------------------------------------------

def _author(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _parse_id(comment_id: uuid.UUID | str) -> uuid.UUID | None:
    if isinstance(comment_id, uuid.UUID):
        return comment_id
    try:
        return uuid.UUID(comment_id)
    except ValueError:
        return None


async def _require_article(db: AsyncSession, article_id: str) -> None:
    if await db.get(Article, article_id) is None:
        raise ArticleNotFound(f"Article '{article_id}' not found")


async def _get_comment(db: AsyncSession, article_id: str, comment_id: uuid.UUID | str) -> Comment:
    cid = _parse_id(comment_id)
    comment = None
    if cid is not None:
        result = await db.execute(
            select(Comment).where(Comment.id == cid, Comment.article_id == article_id)
        )
        comment = result.scalar_one_or_none()
    if comment is None:
        raise CommentNotFound(f"Comment '{comment_id}' not found")
    return comment


# -----------------------------------------------------------------------------

async def list_comments(db: AsyncSession, article_id: str) -> list[Comment]:
    await _require_article(db, article_id)
    result = await db.execute(
        select(Comment)
        .where(Comment.article_id == article_id)
        .order_by(Comment.created_at)
    )
    return list(result.scalars().all())


async def create_comment(db: AsyncSession, article_id: str, data: CommentCreate) -> Comment:
    await _require_article(db, article_id)
    comment = Comment(article_id=article_id, author=_author(data.author), body=data.body)
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment


async def update_comment(
    db: AsyncSession, article_id: str, comment_id: uuid.UUID | str, data: CommentCreate
) -> Comment:
    await _require_article(db, article_id)
    comment = await _get_comment(db, article_id, comment_id)
    comment.author = _author(data.author)
    comment.body = data.body
    await db.flush()
    await db.refresh(comment)
    return comment


async def delete_comment(db: AsyncSession, article_id: str, comment_id: uuid.UUID | str) -> None:
    await _require_article(db, article_id)
    comment = await _get_comment(db, article_id, comment_id)
    await db.execute(delete(Comment).where(Comment.id == comment.id))


# -----------------------------------------------------------------------------
