#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Article / ArticleVersion models
===============================
Article         — mutable envelope (workspace, owner, current_version pointer)
ArticleVersion  — append-only snapshot table (title, content, version number)

The envelope's current_version always equals the highest snapshot version;
fetching the current content means joining on that pointer, not on MAX().
Versions, attachments and comments are removed by ON DELETE CASCADE.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.core.database import Base


# -----------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -----------------------------------------------------------------------------

class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (
        CheckConstraint("current_version >= 1", name="ck_article_current_version"),
    )

    id: Mapped[str] = mapped_column(String(90), primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("workspaces.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    current_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # ── Relationships ───────────────────────────────────────────────────────
    workspace: Mapped["Workspace"] = relationship(back_populates="articles", lazy="raise")  # noqa: F821
    versions: Mapped[list["ArticleVersion"]] = relationship(
        back_populates="article",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ArticleVersion.version",
        lazy="raise",
    )
    attachments: Mapped[list["Attachment"]] = relationship(  # noqa: F821
        back_populates="article",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Attachment.created_at",
        lazy="raise",
    )
    comments: Mapped[list["Comment"]] = relationship(  # noqa: F821
        back_populates="article",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Article {self.id!r} v={self.current_version}>"


# -----------------------------------------------------------------------------

class ArticleVersion(Base):
    __tablename__ = "article_versions"
    __table_args__ = (UniqueConstraint("article_id", "version", name="uq_article_version"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[str] = mapped_column(
        String(90), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    workspace_id: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # ── Relationships ───────────────────────────────────────────────────────
    article: Mapped["Article"] = relationship(back_populates="versions", lazy="raise")

    def __repr__(self) -> str:
        return f"<ArticleVersion article={self.article_id} v={self.version}>"


# -----------------------------------------------------------------------------
