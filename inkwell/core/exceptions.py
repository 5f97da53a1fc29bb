#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Service exceptions
==================
Raised by the service layer and translated to HTTP responses by the handler
registered in ``inkwell.main``.  Each class carries the HTTP status and the
short, stable error word the client sees; storage detail stays in the logs.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Any, Optional


# -----------------------------------------------------------------------------

class InkwellError(Exception):
    """Base class for all service-layer errors."""

    status_code: int = 500
    error: str = "internal error"

    def __init__(self, message: str = "", payload: Optional[dict[str, Any]] = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        rv = dict(self.payload or ())
        rv["error"] = self.error
        rv["detail"] = self.message
        return rv


# -----------------------------------------------------------------------------

class ValidationError(InkwellError):
    """Malformed input, rejected before any write."""
    status_code = 400
    error = "validation failed"


class Forbidden(InkwellError):
    status_code = 403
    error = "forbidden"


class ConflictError(InkwellError):
    """The request cannot be applied to the current state."""
    status_code = 409
    error = "conflict"


class StorageFailure(InkwellError):
    """Persistence or file I/O failed; details are logged, not returned."""
    status_code = 500
    error = "internal error"

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "detail": self.error}


# ── Not found ─────────────────────────────────────────────────────────────

class NotFound(InkwellError):
    status_code = 404
    error = "not found"


class WorkspaceNotFound(NotFound):
    pass


class ArticleNotFound(NotFound):
    pass


class VersionNotFound(NotFound):
    pass


class AttachmentNotFound(NotFound):
    pass


class CommentNotFound(NotFound):
    pass


class UserNotFound(NotFound):
    pass


# ── Internal ──────────────────────────────────────────────────────────────

class VersionConflict(Exception):
    """The envelope moved between read and pointer advance; retry the transaction."""

    def __init__(self, article_id: str, expected: int):
        super().__init__(f"{article_id}: current_version is no longer {expected}")
        self.article_id = article_id
        self.expected = expected


# -----------------------------------------------------------------------------
