#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request/response validation and notification events.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator


# -----------------------------------------------------------------------------

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=120)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
WorkspaceId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Auth / users
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)

    @field_validator("email")
    @classmethod
    def _lower_and_bound(cls, v: str) -> str:
        v = v.strip().lower()
        if len(v) > 160:
            raise ValueError("Email too long")
        return v


class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    role: Literal["admin", "user"]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class RoleUpdate(BaseModel):
    role: Literal["admin", "user"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Workspaces
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class WorkspaceCreate(BaseModel):
    id: Optional[WorkspaceId] = None
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]


class WorkspaceUpdate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]


class WorkspaceOut(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    article_count: int = 0

    model_config = {"from_attributes": True}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Articles
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ArticleCreate(BaseModel):
    workspace_id: WorkspaceId
    title: Title
    content: Content


class ArticleUpdate(BaseModel):
    """Payload for saving a new version of an existing article."""
    title: Title
    content: Content
    workspace_id: Optional[WorkspaceId] = None   # if None, workspace is unchanged
    base_version: Optional[int] = Field(
        default=None, ge=1,
        description="Version the edit was made against; rejected with 409 if no longer current",
    )


class AttachmentOut(BaseModel):
    id: uuid.UUID
    file_name: str
    original_name: str
    mime_type: str
    size: int
    url: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    author: Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=80)]] = None
    body: Content


class CommentOut(BaseModel):
    id: uuid.UUID
    article_id: str
    author: Optional[str]
    body: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ArticleOut(BaseModel):
    id: str
    workspace_id: str
    created_by: Optional[uuid.UUID]
    title: str
    content: str
    version: int                    # version being shown
    latest_version: int             # envelope's current_version
    is_latest: bool
    created_at: datetime
    updated_at: datetime
    version_created_at: datetime
    attachments: list[AttachmentOut] = []
    comments: list[CommentOut] = []


class ArticleSummary(BaseModel):
    id: str
    title: str
    workspace_id: str
    created_by: Optional[uuid.UUID]
    created_at: datetime
    version: int


class VersionSummary(BaseModel):
    version: int
    title: str
    content: str
    workspace_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Notification events
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConnectedEvent(BaseModel):
    type: Literal["connected"] = "connected"
    timestamp: datetime = Field(default_factory=_utcnow)


class ArticleUpdatedEvent(BaseModel):
    type: Literal["articleUpdated"] = "articleUpdated"
    article_id: str
    title: str
    timestamp: datetime = Field(default_factory=_utcnow)


class AttachmentAddedEvent(BaseModel):
    type: Literal["attachmentAdded"] = "attachmentAdded"
    article_id: str
    title: str
    attachment: AttachmentOut
    timestamp: datetime = Field(default_factory=_utcnow)


NotificationEvent = Union[ArticleUpdatedEvent, AttachmentAddedEvent]


# -----------------------------------------------------------------------------
