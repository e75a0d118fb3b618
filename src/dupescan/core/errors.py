"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Error taxonomy for the scanning pipeline.

Per-file errors (NotAccessibleError, NotFoundError, DecodeError) are raised by the
filesystem collaborator and absorbed by the stage that triggered them.
FatalScanError is the only error that ends a scan.
"""
from typing import Optional


class ScanError(Exception):
    """Base class for all scan errors."""


class FileSystemError(ScanError):
    """A filesystem operation failed for a single path."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"{path}: {reason}" if reason else path
        super().__init__(message)


class NotAccessibleError(FileSystemError):
    """Path exists but cannot be listed, opened or read."""


class NotFoundError(FileSystemError):
    """Path does not exist (anymore)."""


class DecodeError(FileSystemError):
    """File bytes are not valid text."""


class FatalScanError(ScanError):
    """Unexpected failure outside every per-file guard. Aborts the whole scan."""


class SessionStateError(ScanError):
    """Illegal scan session transition."""
