from __future__ import annotations

import logging
import mimetypes
import os
from datetime import datetime
from typing import Optional, Tuple

from . import settings
from .errors import UnsupportedFileError
from .nodes import FolderNode
from .walker import walk_archive

logger = logging.getLogger(__name__)


def read_upload(file_obj) -> Tuple[str, bytes]:
    """Read an uploaded file (file-like object or file path) into memory."""
    if file_obj is None:
        raise UnsupportedFileError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, str):
            content = content.encode('utf-8')
        return os.path.basename(getattr(file_obj, 'name', '') or ''), content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'rb') as f:
        return os.path.basename(path), f.read()


def upload_modified_time(file_obj) -> Optional[datetime]:
    """Modification time of an upload on disk, if it has a path."""
    if file_obj is None:
        return None
    path = getattr(file_obj, 'name', file_obj)
    if not isinstance(path, (str, os.PathLike)):
        return None
    try:
        return datetime.fromtimestamp(os.path.getmtime(path))
    except (OSError, ValueError):
        return None


def guess_media_type(name: str) -> str:
    media_type, _ = mimetypes.guess_type(name or '')
    return media_type or ''


def is_archive_upload(name: Optional[str], media_type: Optional[str] = None) -> bool:
    """Archive extension required; an empty media type is tolerated."""
    if not name or not name.lower().endswith(settings.ARCHIVE_EXTENSION):
        return False
    return not media_type or media_type in settings.ARCHIVE_MEDIA_TYPES


def validate_upload(name: Optional[str], media_type: Optional[str], size: int) -> None:
    if not is_archive_upload(name, media_type):
        logger.info("Rejected upload %s (%s)", name, media_type or 'unknown type')
        raise UnsupportedFileError(
            f"Invalid file type. Selected: {media_type or 'unknown'}. Please select a ZIP file."
        )
    if size == 0:
        logger.info("Rejected empty upload %s", name)
        raise UnsupportedFileError("Empty file selected. Please choose a valid ZIP file.")
    if size > settings.MAX_UPLOAD_BYTES:
        logger.info("Rejected upload %s: %d bytes", name, size)
        raise UnsupportedFileError(
            f"File too large ({size / 1024 / 1024:.1f}MB). "
            f"Maximum size is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB."
        )


def load_archive(
    name: str,
    data: bytes,
    modified_by: str = settings.DEFAULT_MODIFIED_BY,
    media_type: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> FolderNode:
    """Gate an upload and walk it into a tree.

    When `media_type` is None it is guessed from the file name. The root
    folder is stamped with `created_at`, or the current time.
    """
    if media_type is None:
        media_type = guess_media_type(name)
    validate_upload(name, media_type, len(data or b''))
    tree = walk_archive(data, name, modified_by=modified_by, created_at=created_at)
    logger.info("Loaded archive %s", name)
    return tree


def load_archive_upload(file_obj, modified_by: str = settings.DEFAULT_MODIFIED_BY) -> FolderNode:
    name, data = read_upload(file_obj)
    return load_archive(name, data, modified_by=modified_by, created_at=upload_modified_time(file_obj))
