"""
pokeroster.services.upload_service — Avatar upload handling
============================================================

Trainer and Pokémon avatars are stored in a configurable ``uploads/``
directory (Docker volume) and served via the ``/uploads`` static mount.
Files are named ``{upload-timestamp-ms}-{original-name}``.

Deleting the owning record removes its file on a best-effort basis:
failures are logged, never retried, and never fail the request.  Shared
placeholder images and external URLs are left alone.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(os.getenv("POKEROSTER_UPLOAD_DIR", "uploads"))
UPLOAD_URL_PREFIX = "/uploads/"
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
ALLOWED_MIME_TYPES = {
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
}


def ensure_upload_dir() -> None:
    """Create the upload directory if it doesn't exist."""
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)


def _validate(filename: str, content: bytes, content_type: str | None) -> str:
    if not content:
        raise ValueError("Uploaded file is empty")

    if len(content) > MAX_FILE_SIZE:
        raise ValueError(
            f"File too large: {len(content)} bytes (max {MAX_FILE_SIZE // 1024 // 1024}MB)"
        )

    ext = Path(filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValueError(
            f"File type not allowed: {ext!r}. "
            f"Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    if content_type and content_type not in ALLOWED_MIME_TYPES:
        raise ValueError(
            f"MIME type not allowed: {content_type!r}. "
            f"Allowed: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
        )
    return ext


async def save_upload(filename: str, content: bytes, content_type: str | None = None) -> str:
    """Validate and persist an uploaded avatar.

    Parameters
    ----------
    filename:
        Original filename from the upload.
    content:
        Raw file bytes.
    content_type:
        MIME type from the upload header.

    Returns
    -------
    str
        URL path to the saved file (e.g. ``/uploads/1718000000000-pikachu.png``).

    Raises
    ------
    ValueError
        If validation fails (wrong type, too large, empty).
    """
    _validate(filename, content, content_type)

    # Only the basename survives; directory parts in the client name are dropped
    original = Path(filename).name.replace(" ", "_")
    stored_name = f"{int(time.time() * 1000)}-{original}"

    ensure_upload_dir()
    dest = UPLOAD_DIR / stored_name
    await asyncio.to_thread(dest.write_bytes, content)

    logger.info("Stored upload %s (%d bytes)", stored_name, len(content))
    return f"{UPLOAD_URL_PREFIX}{stored_name}"


def delete_upload(url_path: str | None, *, keep: frozenset[str] = frozenset()) -> bool:
    """Remove an uploaded file by its URL path.

    Only paths this server issued (starting with ``/uploads/``) are
    considered; external URLs are ignored even when they contain that
    segment.  *keep* lists URLs that must never be removed (the shared
    placeholders).
    Returns True if the file existed and was deleted.
    """
    if not url_path or url_path in keep or not url_path.startswith(UPLOAD_URL_PREFIX):
        return False
    filename = url_path[len(UPLOAD_URL_PREFIX):]
    if not filename or "/" in filename or filename in {".", ".."}:
        return False
    filepath = UPLOAD_DIR / filename
    try:
        if filepath.exists() and filepath.is_file():
            filepath.unlink()
            return True
    except OSError:
        logger.warning("Could not delete upload %s", filepath, exc_info=True)
    return False
