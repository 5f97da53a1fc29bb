#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Attachments router
==================
GET    /api/articles/{id}/attachments            — list attachments
POST   /api/articles/{id}/attachments            — upload file (image/* or PDF)
DELETE /api/articles/{id}/attachments/{att_id}   — delete file

Bytes are served by the static mount at /uploads/{id}/{file_name}.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Response, UploadFile, status


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ValidationError
from inkwell.core.security import CurrentUser
from inkwell.schemas import AttachmentOut
from inkwell.services.orchestrator import ArticleService
from .deps import get_article_service, require_editor

router = APIRouter(prefix="/articles/{article_id}/attachments", tags=["Attachments"])


def _check_type(file: UploadFile) -> None:
    content_type = (file.content_type or "").lower()
    if not (content_type.startswith("image/") or content_type == "application/pdf"):
        raise ValidationError("Only images and PDF files are allowed")


@router.get("", response_model=list[AttachmentOut])
async def list_attachments_endpoint(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    return await service.list_attachments(article_id)


@router.post("", response_model=AttachmentOut, status_code=status.HTTP_201_CREATED)
async def upload_attachment_endpoint(
    article_id: str,
    file: UploadFile = File(...),
    service: ArticleService = Depends(get_article_service),
    _: CurrentUser = Depends(require_editor),
):
    _check_type(file)
    return await service.add_attachment(article_id, file)


@router.delete("/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment_endpoint(
    article_id: str,
    attachment_id: str,
    service: ArticleService = Depends(get_article_service),
    _: CurrentUser = Depends(require_editor),
):
    await service.remove_attachment(article_id, attachment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
