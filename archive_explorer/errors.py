from __future__ import annotations


class ArchiveExplorerError(ValueError):
    """Base class for errors surfaced to the user as a status message."""


class EmptyInputError(ArchiveExplorerError):
    """Raised when a CSV payload has no non-blank lines."""


class UnsupportedFileError(ArchiveExplorerError):
    """Raised when an upload is rejected before the archive is walked."""


class DecodeError(ArchiveExplorerError):
    """Raised when archive bytes cannot be read."""
