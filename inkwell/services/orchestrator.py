#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Article service
===============
Entry point for every article mutation and read.  Each operation runs in its
own session and transaction; notifications go out only after commit.

    service = ArticleService(session_factory, storage, notifier, retry_limit=5)
    article = await service.create(ArticleCreate(...), created_by=user.id)
    article = await service.update(article.id, ArticleUpdate(...))
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import (
    ArticleNotFound, ConflictError, InkwellError, StorageFailure,
    ValidationError, VersionConflict, WorkspaceNotFound,
)
from inkwell.schemas import (
    ArticleCreate, ArticleOut, ArticleSummary, ArticleUpdate, ArticleUpdatedEvent,
    AttachmentAddedEvent, AttachmentOut, CommentCreate, CommentOut, VersionSummary,
)
from inkwell.models import User
from . import article_store as store
from . import attachment_ledger as ledger
from . import comment_service as comments
from .export import export_filename, render_article_pdf
from .notifications import Notifier
from .storage import FileStorage, Upload
from .workspace_service import workspace_exists

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class ArticleService:

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage: FileStorage,
        notifier: Notifier,
        *,
        retry_limit: int = 5,
    ):
        self._factory = session_factory
        self.storage = storage
        self.notifier = notifier
        self.retry_limit = max(1, retry_limit)

    # ── Transactions ───────────────────────────────────────────────────────

    @asynccontextmanager
    async def _transaction(
        self,
        operation: str,
        article_id: Optional[str] = None,
        passthrough: tuple[type[BaseException], ...] = (),
    ) -> AsyncIterator[AsyncSession]:
        """Session + transaction; commits on exit, rolls back on any error.

        Database errors other than ``passthrough`` surface as StorageFailure.
        """
        try:
            async with self._factory() as db, db.begin():
                yield db
        except (InkwellError, VersionConflict) + passthrough:
            raise
        except SQLAlchemyError as exc:
            logger.exception("%s failed for article %s", operation, article_id)
            raise StorageFailure(f"{operation} failed for article {article_id}") from exc

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Articles
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def create(self, data: ArticleCreate, created_by: Optional[uuid.UUID] = None) -> ArticleOut:
        """Envelope plus version 1.  A commit-time id collision picks a new id."""
        for attempt in range(1, self.retry_limit + 1):
            try:
                async with self._transaction("create", passthrough=(IntegrityError,)) as db:
                    if not await workspace_exists(db, data.workspace_id):
                        raise ValidationError(f"Workspace '{data.workspace_id}' does not exist")
                    article, _ = await store.create_article(
                        db, data.title, data.content, data.workspace_id, created_by
                    )
                    out = await store.get_article(db, article.id)
            except IntegrityError:
                logger.warning("create: id collision on attempt %d, retrying", attempt)
                continue
            logger.info("Created article %s in %s", out.id, out.workspace_id)
            return out
        raise ConflictError("Could not allocate an article id, try again")

    # -----------------------------------------------------------------------------

    async def update(self, article_id: str, data: ArticleUpdate) -> ArticleOut:
        """Append a new version.  Concurrent callers each get their own version."""
        for attempt in range(1, self.retry_limit + 1):
            try:
                async with self._transaction(
                    "update", article_id, passthrough=(IntegrityError,)
                ) as db:
                    article = await store.lock_article(db, article_id)

                    if data.base_version is not None and data.base_version != article.current_version:
                        raise ConflictError(
                            f"Version {data.base_version} is not current "
                            f"(latest is {article.current_version})",
                            payload={"latest_version": article.current_version},
                        )

                    if (
                        data.workspace_id
                        and data.workspace_id != article.workspace_id
                        and not await workspace_exists(db, data.workspace_id)
                    ):
                        raise ValidationError(f"Workspace '{data.workspace_id}' does not exist")

                    await store.append_version(
                        db, article, data.title, data.content, data.workspace_id
                    )
                    out = await store.get_article(db, article_id)
            except (VersionConflict, IntegrityError) as exc:
                logger.warning(
                    "update %s: version race on attempt %d/%d (%s)",
                    article_id, attempt, self.retry_limit, exc.__class__.__name__,
                )
                continue

            self.notifier.publish(ArticleUpdatedEvent(article_id=out.id, title=out.title))
            return out

        raise ConflictError(
            f"Article '{article_id}' is being edited concurrently, try again"
        )

    # -----------------------------------------------------------------------------

    async def get(self, article_id: str, version: Optional[int] = None) -> ArticleOut:
        if version is not None and version < 1:
            raise ValidationError("Version must be a positive integer")
        async with self._transaction("get", article_id) as db:
            return await store.get_article(db, article_id, version)

    async def list(self, workspace_id: str, search: Optional[str] = None) -> list[ArticleSummary]:
        async with self._transaction("list") as db:
            if not await workspace_exists(db, workspace_id):
                raise WorkspaceNotFound(f"Workspace '{workspace_id}' not found")
            return await store.list_articles(db, workspace_id, (search or "").strip() or None)

    async def list_versions(self, article_id: str) -> list[VersionSummary]:
        async with self._transaction("list_versions", article_id) as db:
            versions = await store.list_versions(db, article_id)
        if not versions:
            raise ArticleNotFound(f"Article '{article_id}' not found")
        return versions

    async def delete(self, article_id: str) -> None:
        """Remove the envelope and everything under it, then its files."""
        async with self._transaction("delete", article_id) as db:
            if not await store.delete_article(db, article_id):
                raise ArticleNotFound(f"Article '{article_id}' not found")
        await self.storage.delete_all_files_for(article_id)
        logger.info("Deleted article %s", article_id)

    async def export_pdf(self, article_id: str) -> tuple[str, bytes]:
        """Current version as a PDF; returns (download file name, document bytes)."""
        async with self._transaction("export", article_id) as db:
            article = await store.get_article(db, article_id)
            author = None
            if article.created_by is not None:
                user = await db.get(User, article.created_by)
                author = user.email if user is not None else None
        pdf = await asyncio.to_thread(render_article_pdf, article, author)
        return export_filename(article.title), pdf

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Attachments
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def list_attachments(self, article_id: str) -> list[AttachmentOut]:
        async with self._transaction("list_attachments", article_id) as db:
            rows = await ledger.list_attachments(db, article_id)
            return [AttachmentOut.model_validate(a) for a in rows]

    async def add_attachment(self, article_id: str, upload: Upload) -> AttachmentOut:
        """Bytes first, then metadata; the bytes are removed if metadata fails."""
        async with self._transaction("add_attachment", article_id) as db:
            await store.current_snapshot(db, article_id)

        stored = await self.storage.write_file(article_id, upload)
        try:
            async with self._transaction("add_attachment", article_id) as db:
                att = await ledger.add_attachment(
                    db,
                    article_id,
                    file_name=stored.file_name,
                    original_name=stored.original_name,
                    mime_type=stored.mime_type,
                    size=stored.size,
                    url=stored.url,
                )
                out = AttachmentOut.model_validate(att)
                title = (await store.current_snapshot(db, article_id)).title
        except Exception:
            logger.warning(
                "Attachment metadata for %s not saved, removing %s", article_id, stored.file_name
            )
            await self.storage.delete_file(article_id, stored.file_name)
            raise

        self.notifier.publish(
            AttachmentAddedEvent(article_id=article_id, title=title, attachment=out)
        )
        return out

    async def remove_attachment(self, article_id: str, attachment_id: uuid.UUID | str) -> None:
        async with self._transaction("remove_attachment", article_id) as db:
            att = await ledger.remove_attachment(db, article_id, attachment_id)
            file_name = att.file_name
            title = (await store.current_snapshot(db, article_id)).title

        await self.storage.delete_file(article_id, file_name)
        self.notifier.publish(ArticleUpdatedEvent(article_id=article_id, title=title))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Comments
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def list_comments(self, article_id: str) -> list[CommentOut]:
        async with self._transaction("list_comments", article_id) as db:
            rows = await comments.list_comments(db, article_id)
            return [CommentOut.model_validate(c) for c in rows]

    async def add_comment(self, article_id: str, data: CommentCreate) -> CommentOut:
        async with self._transaction("add_comment", article_id) as db:
            return CommentOut.model_validate(await comments.create_comment(db, article_id, data))

    async def edit_comment(
        self, article_id: str, comment_id: uuid.UUID | str, data: CommentCreate
    ) -> CommentOut:
        async with self._transaction("edit_comment", article_id) as db:
            return CommentOut.model_validate(
                await comments.update_comment(db, article_id, comment_id, data)
            )

    async def remove_comment(self, article_id: str, comment_id: uuid.UUID | str) -> None:
        async with self._transaction("remove_comment", article_id) as db:
            await comments.delete_comment(db, article_id, comment_id)


# -----------------------------------------------------------------------------
