from __future__ import annotations

import io
import logging
import os
import zipfile
import zlib
from datetime import datetime
from typing import Dict, Optional

from . import settings
from .errors import DecodeError
from .nodes import FileNode, FolderNode

logger = logging.getLogger(__name__)


def archive_root_name(archive_name: Optional[str]) -> str:
    """Archive file name without directories or the archive extension."""
    name = os.path.basename(archive_name or '')
    if name.lower().endswith(settings.ARCHIVE_EXTENSION):
        name = name[: -len(settings.ARCHIVE_EXTENSION)]
    return name or 'archive'


def file_extension(name: str) -> str:
    if '.' not in name:
        return ''
    return name.rsplit('.', 1)[-1].lower()


def entry_timestamp(info: zipfile.ZipInfo) -> datetime:
    try:
        return datetime(*info.date_time)
    except (TypeError, ValueError):
        return datetime.now()


def walk_archive(
    data: bytes,
    archive_name: Optional[str] = None,
    modified_by: str = settings.DEFAULT_MODIFIED_BY,
    created_at: Optional[datetime] = None,
) -> FolderNode:
    """Build a folder tree from zip bytes, keeping only supported file types.

    Entries are visited in the archive's own order. An entry whose parent
    folder has not been seen yet is skipped, so archives that list a file
    before its directory (or omit directory entries) lose that file.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zlib.error, OSError, ValueError) as exc:
        logger.warning("Could not open archive %s: %s", archive_name, exc)
        raise DecodeError(f"Could not read archive: {exc}") from exc

    root = FolderNode(
        name=archive_root_name(archive_name),
        path='',
        created_at=created_at or datetime.now(),
        modified_by=modified_by,
    )
    folders: Dict[str, FolderNode] = {'': root}
    skipped = 0
    dropped = 0

    with archive:
        for info in archive.infolist():
            parts = [p for p in info.filename.split('/') if p]
            if not parts:
                continue
            name = parts[-1]
            parent = folders.get('/'.join(parts[:-1]))
            if parent is None:
                skipped += 1
                logger.debug("Skipping %s: parent folder not seen yet", info.filename)
                continue

            path = '/'.join(parts)
            created = entry_timestamp(info)

            if info.is_dir():
                folder = FolderNode(name=name, path=path, created_at=created, modified_by=modified_by)
                parent.children.append(folder)
                folders[path] = folder
                continue

            ext = file_extension(name)
            if ext not in settings.SUPPORTED_EXTENSIONS:
                dropped += 1
                continue

            try:
                payload = archive.read(info)
            except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as exc:
                logger.warning("Could not read %s from %s: %s", info.filename, archive_name, exc)
                raise DecodeError(f"Could not read {info.filename}: {exc}") from exc

            parent.children.append(
                FileNode(
                    name=name,
                    path=path,
                    created_at=created,
                    modified_by=modified_by,
                    file_type=ext,
                    payload=payload,
                )
            )

    logger.debug(
        "Walked %s: %d folders, %d orphaned entries skipped, %d unsupported files dropped",
        archive_name, len(folders) - 1, skipped, dropped,
    )
    return root
