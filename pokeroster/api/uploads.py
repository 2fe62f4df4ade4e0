"""
pokeroster.api.uploads — Multipart avatar helpers shared by routers
====================================================================
"""

from __future__ import annotations

from fastapi import UploadFile

from pokeroster.errors import ValidationError
from pokeroster.services.upload_service import UPLOAD_URL_PREFIX, save_upload


async def store_avatar(file: UploadFile | None) -> str | None:
    """Persist an optional ``imageFile`` upload and return its URL path.

    Returns ``None`` when no file was sent.  Rejected files raise
    :class:`ValidationError` (400).
    """
    if file is None or not file.filename:
        return None
    content = await file.read()
    try:
        return await save_upload(file.filename, content, file.content_type)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def linked_image_url(url: str | None) -> str | None:
    """Validate a client-supplied ``image_url`` form value.

    Stored files may only be attached through an upload on the same
    request; pointing a record at an existing ``/uploads/`` path would let
    deleting that record remove someone else's file.
    """
    url = (url or "").strip()
    if not url:
        return None
    if url.startswith(UPLOAD_URL_PREFIX) or url.startswith("//"):
        raise ValidationError(
            "image_url cannot reference an uploaded file; send imageFile instead."
        )
    return url
