#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Initial schema — workspaces, users, articles and their versions, attachments, comments

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID as PG_UUID


# -----------------------------------------------------------------------------

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


# -----------------------------------------------------------------------------

def upgrade() -> None:
    # ── workspaces ─────────────────────────────────────────────────────────────
    op.create_table(
        "workspaces",
        sa.Column("id",         sa.String(50),  primary_key=True),
        sa.Column("name",       sa.String(120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )

    # ── users ──────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id",              PG_UUID(as_uuid=True), primary_key=True),
        sa.Column("email",           sa.String(160), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active",       sa.Boolean(),   nullable=False, server_default=sa.text("TRUE")),
        sa.Column("is_admin",        sa.Boolean(),   nullable=False, server_default=sa.text("FALSE")),
        sa.Column("created_at",      sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── articles (envelope) ────────────────────────────────────────────────────
    op.create_table(
        "articles",
        sa.Column("id",              sa.String(90), primary_key=True),
        sa.Column("workspace_id",    sa.String(50),
                  sa.ForeignKey("workspaces.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("created_by",      PG_UUID(as_uuid=True),
                  sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("current_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at",      sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at",      sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.CheckConstraint("current_version >= 1", name="ck_article_current_version"),
    )
    op.create_index("ix_articles_workspace_id", "articles", ["workspace_id"])
    op.create_index("ix_articles_created_at",   "articles", ["created_at"])

    # ── article_versions (append-only snapshots) ───────────────────────────────
    op.create_table(
        "article_versions",
        sa.Column("id",           sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id",   sa.String(90),
                  sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("version",      sa.Integer(),   nullable=False),
        sa.Column("title",        sa.String(120), nullable=False),
        sa.Column("content",      sa.Text(),      nullable=False),
        sa.Column("workspace_id", sa.String(50),  nullable=False),
        sa.Column("created_at",   sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.UniqueConstraint("article_id", "version", name="uq_article_version"),
    )
    op.create_index("ix_article_versions_article_id", "article_versions", ["article_id"])

    # ── attachments ────────────────────────────────────────────────────────────
    op.create_table(
        "attachments",
        sa.Column("id",            PG_UUID(as_uuid=True), primary_key=True),
        sa.Column("article_id",    sa.String(90),
                  sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("file_name",     sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("mime_type",     sa.String(128), nullable=False),
        sa.Column("size",          sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("url",           sa.String(512), nullable=False),
        sa.Column("created_at",    sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )
    op.create_index("ix_attachments_article_id", "attachments", ["article_id"])

    # ── comments ───────────────────────────────────────────────────────────────
    op.create_table(
        "comments",
        sa.Column("id",         PG_UUID(as_uuid=True), primary_key=True),
        sa.Column("article_id", sa.String(90),
                  sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author",     sa.String(80), nullable=True),
        sa.Column("body",       sa.Text(),     nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )
    op.create_index("ix_comments_article_id", "comments", ["article_id"])


# -----------------------------------------------------------------------------

def downgrade() -> None:
    op.drop_table("comments")
    op.drop_table("attachments")
    op.drop_table("article_versions")
    op.drop_table("articles")
    op.drop_table("users")
    op.drop_table("workspaces")


# -----------------------------------------------------------------------------
