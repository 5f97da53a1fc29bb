#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Attachment ledger
=================
Metadata rows for files bound to an article envelope.  The bytes live in
``FileStorage``; this module never touches the disk.  Callers write bytes
first and remove them again if the metadata write fails.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ArticleNotFound, AttachmentNotFound
from inkwell.models import Article, Attachment
from .article_store import lock_article


# -----------------------------------------------------------------------------

def _parse_id(attachment_id: uuid.UUID | str) -> uuid.UUID | None:
    if isinstance(attachment_id, uuid.UUID):
        return attachment_id
    try:
        return uuid.UUID(attachment_id)
    except ValueError:
        return None


# -----------------------------------------------------------------------------

async def list_attachments(db: AsyncSession, article_id: str) -> list[Attachment]:
    if await db.get(Article, article_id) is None:
        raise ArticleNotFound(f"Article '{article_id}' not found")
    result = await db.execute(
        select(Attachment)
        .where(Attachment.article_id == article_id)
        .order_by(Attachment.created_at)
    )
    return list(result.scalars().all())


# -----------------------------------------------------------------------------

async def add_attachment(
    db: AsyncSession,
    article_id: str,
    *,
    file_name: str,
    original_name: str,
    mime_type: str,
    size: int,
    url: str,
) -> Attachment:
    article = await lock_article(db, article_id)
    now = datetime.now(timezone.utc)
    att = Attachment(
        article_id=article.id,
        file_name=file_name,
        original_name=original_name,
        mime_type=mime_type,
        size=size,
        url=url,
        created_at=now,
    )
    db.add(att)
    article.updated_at = now
    await db.flush()
    return att


# -----------------------------------------------------------------------------

async def remove_attachment(
    db: AsyncSession, article_id: str, attachment_id: uuid.UUID | str
) -> Attachment:
    """Drop the metadata row and return it so the caller can delete the bytes."""
    article = await lock_article(db, article_id)

    att_id = _parse_id(attachment_id)
    att = None
    if att_id is not None:
        result = await db.execute(
            select(Attachment).where(
                Attachment.article_id == article.id,
                Attachment.id == att_id,
            )
        )
        att = result.scalar_one_or_none()
    if att is None:
        raise AttachmentNotFound(f"Attachment '{attachment_id}' not found on '{article_id}'")

    await db.delete(att)
    article.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return att


# -----------------------------------------------------------------------------
