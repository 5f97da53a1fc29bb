#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Comment model — discussion entries on an article envelope (not versioned)."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.core.database import Base


# -----------------------------------------------------------------------------

class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    article_id: Mapped[str] = mapped_column(
        String(90), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    article: Mapped["Article"] = relationship(back_populates="comments", lazy="raise")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Comment {self.id} on article={self.article_id}>"


# -----------------------------------------------------------------------------
