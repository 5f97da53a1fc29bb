#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Attachment byte storage
=======================
Files are stored under:  {attachment_root}/{article_id}/{file_name}
file_name is a random hex name plus the original (sanitised) extension, so
two uploads of "photo.png" never collide.  Served back by the /uploads mount.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import logging
import mimetypes
import re
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import aiofiles
import aiofiles.os


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import StorageFailure, ValidationError

logger = logging.getLogger(__name__)

_SAFE_EXT = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


# -----------------------------------------------------------------------------

class Upload(Protocol):
    """The part of ``fastapi.UploadFile`` that storage needs."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class StoredFile:
    file_name: str
    original_name: str
    mime_type: str
    size: int
    url: str


# -----------------------------------------------------------------------------

def _extension(filename: str) -> str:
    ext = Path(filename).suffix.lower()
    return ext if _SAFE_EXT.match(ext) else ""


def public_url(article_id: str, file_name: str) -> str:
    return f"/uploads/{article_id}/{file_name}"


# -----------------------------------------------------------------------------

class FileStorage:

    def __init__(self, root: Path, max_bytes: int, chunk_size: int = 65536):
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.chunk_size = chunk_size

    # ── Paths ──────────────────────────────────────────────────────────────

    def article_dir(self, article_id: str) -> Path:
        path = self.root / article_id
        if path.parent != self.root or article_id in ("", ".", ".."):
            raise ValidationError(f"Invalid article id '{article_id}'")
        return path

    def path_for(self, article_id: str, file_name: str) -> Path:
        path = self.article_dir(article_id) / file_name
        if path.parent != self.article_dir(article_id):
            raise ValidationError(f"Invalid file name '{file_name}'")
        return path

    # ── Writes ─────────────────────────────────────────────────────────────

    async def write_file(self, article_id: str, upload: Upload) -> StoredFile:
        """Stream ``upload`` to disk; ValidationError past ``max_bytes``."""
        original = upload.filename or "upload.bin"
        file_name = f"{uuid.uuid4().hex}{_extension(original)}"
        target = self.path_for(article_id, file_name)

        total = 0
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as out:
                while chunk := await upload.read(self.chunk_size):
                    total += len(chunk)
                    if total > self.max_bytes:
                        break
                    await out.write(chunk)
        except OSError as exc:
            logger.exception("Writing attachment for %s failed", article_id)
            await self.delete_file(article_id, file_name)
            raise StorageFailure(f"write_file failed for {article_id}") from exc

        if total > self.max_bytes:
            await self.delete_file(article_id, file_name)
            raise ValidationError(f"File is larger than the {self.max_bytes} byte limit")

        mime_type = (
            upload.content_type
            or mimetypes.guess_type(original)[0]
            or "application/octet-stream"
        )
        return StoredFile(
            file_name=file_name,
            original_name=original,
            mime_type=mime_type,
            size=total,
            url=public_url(article_id, file_name),
        )

    # ── Deletes (best-effort) ──────────────────────────────────────────────

    async def delete_file(self, article_id: str, file_name: str) -> bool:
        path = self.path_for(article_id, file_name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        except OSError:
            logger.warning("Could not delete %s", path, exc_info=True)
            return False
        return True

    async def delete_all_files_for(self, article_id: str) -> None:
        path = self.article_dir(article_id)
        if not path.exists():
            return
        try:
            await asyncio.to_thread(shutil.rmtree, path)
        except OSError:
            logger.warning("Could not remove attachment directory %s", path, exc_info=True)


# -----------------------------------------------------------------------------
