#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Workspace model
===============
A Workspace is the tenant boundary grouping a set of articles.
Ids are short slugs ("default", "engineering", ...); only the name may change.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.core.database import Base


# -----------------------------------------------------------------------------

class Workspace(Base):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # ── Relationships ───────────────────────────────────────────────────────
    articles: Mapped[list["Article"]] = relationship(          # noqa: F821
        back_populates="workspace", passive_deletes="all", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Workspace {self.id!r}>"


# -----------------------------------------------------------------------------
