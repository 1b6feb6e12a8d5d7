from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


MAX_UPLOAD_BYTES = _env_int('ARCHIVE_EXPLORER_MAX_UPLOAD_MB', 50) * 1024 * 1024

DEFAULT_ITEMS_PER_PAGE = _env_int('ARCHIVE_EXPLORER_ITEMS_PER_PAGE', 5)
PAGE_SIZE_CHOICES = (5, 10, 25, 50, 100)

DEFAULT_MODIFIED_BY = os.environ.get('ARCHIVE_EXPLORER_MODIFIED_BY') or 'You'

ARCHIVE_EXTENSION = '.zip'
ARCHIVE_MEDIA_TYPES = (
    'application/zip',
    'application/x-zip-compressed',
    'application/x-zip',
    'multipart/x-zip',
)
SUPPORTED_EXTENSIONS = ('csv', 'pdf')

LOG_LEVEL = (os.environ.get('ARCHIVE_EXPLORER_LOG_LEVEL') or 'INFO').upper()
