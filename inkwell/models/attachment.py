#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Attachment model
================
Files uploaded to an article are stored on disk and tracked here.
Attachments belong to the article envelope, not to any one version, so they
are visible whichever historical version is being read.
file_name is the storage-local name under {attachment_root}/{article_id}/.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.core.database import Base


# -----------------------------------------------------------------------------

class Attachment(Base):
    __tablename__ = "attachments"

    id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    article_id: Mapped[str] = mapped_column(
        String(90), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    # ── Relationships ───────────────────────────────────────────────────────
    article: Mapped["Article"] = relationship(back_populates="attachments", lazy="raise")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Attachment {self.file_name!r} on article={self.article_id}>"


# -----------------------------------------------------------------------------
