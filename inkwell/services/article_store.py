#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Article store
=============
Envelope + append-only snapshot persistence: create (envelope and version 1),
read current or a specific version, append a new version, list, history and
delete.

Every function expects a session that is already inside a transaction; the
transaction boundary belongs to ``inkwell.services.orchestrator``.

Version allocation is "current_version + 1" under three guards:
  1. the envelope row is read with SELECT ... FOR UPDATE (ignored by SQLite),
  2. the pointer is advanced with a compare-and-swap UPDATE that only matches
     while current_version is still the value that was read,
  3. (article_id, version) is unique, so a duplicate snapshot cannot commit.
A failed guard raises and the caller retries the whole transaction.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ArticleNotFound, VersionConflict, VersionNotFound
from inkwell.models import Article, ArticleVersion
from inkwell.schemas import (
    ArticleOut, ArticleSummary, AttachmentOut, CommentOut, VersionSummary,
)
from .slugs import article_id_for, with_suffix

_ID_LENGTH = 90


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def _id_taken(db: AsyncSession, article_id: str) -> bool:
    result = await db.execute(select(Article.id).where(Article.id == article_id))
    return result.scalar_one_or_none() is not None


async def allocate_article_id(db: AsyncSession, title: str, stamp: datetime) -> str:
    """Slug + minute timestamp; a taken id gets -2, -3, ... appended."""
    base = article_id_for(title, stamp)
    n = 1
    while await _id_taken(db, with_suffix(base, n, _ID_LENGTH)):
        n += 1
    return with_suffix(base, n, _ID_LENGTH)


async def get_snapshot(db: AsyncSession, article_id: str, version: int) -> Optional[ArticleVersion]:
    result = await db.execute(
        select(ArticleVersion).where(
            ArticleVersion.article_id == article_id,
            ArticleVersion.version == version,
        )
    )
    return result.scalar_one_or_none()


def _build_article_out(article: Article, snapshot: ArticleVersion) -> ArticleOut:
    return ArticleOut(
        id=article.id,
        workspace_id=article.workspace_id,
        created_by=article.created_by,
        title=snapshot.title,
        content=snapshot.content,
        version=snapshot.version,
        latest_version=article.current_version,
        is_latest=snapshot.version == article.current_version,
        created_at=article.created_at,
        updated_at=article.updated_at,
        version_created_at=snapshot.created_at,
        attachments=[AttachmentOut.model_validate(a) for a in article.attachments],
        comments=[CommentOut.model_validate(c) for c in article.comments],
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Writes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def create_article(
    db: AsyncSession,
    title: str,
    content: str,
    workspace_id: str,
    created_by: Optional[uuid.UUID] = None,
) -> tuple[Article, ArticleVersion]:
    """Insert the envelope at current_version=1 together with snapshot 1."""
    now = _utcnow()
    article = Article(
        id=await allocate_article_id(db, title, now),
        workspace_id=workspace_id,
        created_by=created_by,
        current_version=1,
        created_at=now,
        updated_at=now,
    )
    db.add(article)
    await db.flush()

    version = ArticleVersion(
        article_id=article.id,
        version=1,
        title=title,
        content=content,
        workspace_id=workspace_id,
        created_at=now,
    )
    db.add(version)
    await db.flush()
    return article, version


# -----------------------------------------------------------------------------

async def lock_article(db: AsyncSession, article_id: str) -> Article:
    """Load the envelope row for writing, or raise ArticleNotFound."""
    result = await db.execute(
        select(Article).where(Article.id == article_id).with_for_update()
    )
    article = result.scalar_one_or_none()
    if article is None:
        raise ArticleNotFound(f"Article '{article_id}' not found")
    return article


# -----------------------------------------------------------------------------

async def append_version(
    db: AsyncSession,
    article: Article,
    title: str,
    content: str,
    workspace_id: Optional[str] = None,
) -> ArticleVersion:
    """Write snapshot N+1 and advance the envelope pointer from N to N+1.

    Snapshot N is never touched.  Raises VersionConflict when the pointer
    has moved since ``article`` was read.
    """
    expected = article.current_version
    next_ver = expected + 1
    target_workspace = workspace_id or article.workspace_id
    now = _utcnow()

    result = await db.execute(
        update(Article)
        .where(Article.id == article.id, Article.current_version == expected)
        .values(current_version=next_ver, workspace_id=target_workspace, updated_at=now)
    )
    if result.rowcount != 1:
        raise VersionConflict(article.id, expected)

    version = ArticleVersion(
        article_id=article.id,
        version=next_ver,
        title=title,
        content=content,
        workspace_id=target_workspace,
        created_at=now,
    )
    db.add(version)
    await db.flush()
    return version


# -----------------------------------------------------------------------------

async def delete_article(db: AsyncSession, article_id: str) -> bool:
    """Delete the envelope; versions, comments and attachment rows cascade."""
    result = await db.execute(delete(Article).where(Article.id == article_id))
    return result.rowcount > 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Reads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def get_article(
    db: AsyncSession, article_id: str, version: Optional[int] = None
) -> ArticleOut:
    """Envelope plus the requested snapshot (default: the current one)."""
    result = await db.execute(
        select(Article)
        .options(selectinload(Article.attachments), selectinload(Article.comments))
        .where(Article.id == article_id)
        .execution_options(populate_existing=True)
    )
    article = result.scalar_one_or_none()
    if article is None:
        raise ArticleNotFound(f"Article '{article_id}' not found")

    target = article.current_version if version is None else version
    snapshot = await get_snapshot(db, article_id, target)
    if snapshot is None:
        raise VersionNotFound(f"Article '{article_id}' has no version {target}")
    return _build_article_out(article, snapshot)


# -----------------------------------------------------------------------------

async def current_snapshot(db: AsyncSession, article_id: str) -> ArticleVersion:
    result = await db.execute(
        select(ArticleVersion)
        .join(Article, Article.id == ArticleVersion.article_id)
        .where(
            Article.id == article_id,
            ArticleVersion.version == Article.current_version,
        )
    )
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        raise ArticleNotFound(f"Article '{article_id}' not found")
    return snapshot


# -----------------------------------------------------------------------------

async def list_articles(
    db: AsyncSession, workspace_id: str, search: Optional[str] = None
) -> list[ArticleSummary]:
    """Summaries of one workspace, newest first; search looks at current versions only."""
    q = (
        select(Article, ArticleVersion)
        .join(
            ArticleVersion,
            (ArticleVersion.article_id == Article.id)
            & (ArticleVersion.version == Article.current_version),
        )
        .where(Article.workspace_id == workspace_id)
        .order_by(Article.created_at.desc())
    )

    if search:
        pattern = _like_pattern(search)
        q = q.where(or_(
            ArticleVersion.title.ilike(pattern, escape="\\"),
            ArticleVersion.content.ilike(pattern, escape="\\"),
        ))

    result = await db.execute(q)
    items = []
    for article, version in result.all():
        items.append(ArticleSummary(
            id=article.id,
            title=version.title,
            workspace_id=article.workspace_id,
            created_by=article.created_by,
            created_at=article.created_at,
            version=article.current_version,
        ))
    return items


# -----------------------------------------------------------------------------

async def list_versions(db: AsyncSession, article_id: str) -> list[VersionSummary]:
    """All snapshots, newest first.  Empty means the article does not exist."""
    result = await db.execute(
        select(ArticleVersion)
        .where(ArticleVersion.article_id == article_id)
        .order_by(ArticleVersion.version.desc())
    )
    return [VersionSummary.model_validate(v) for v in result.scalars().all()]


# -----------------------------------------------------------------------------
