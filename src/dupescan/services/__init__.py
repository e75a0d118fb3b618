"""Background scans, candidate removal and duplicate group management services."""

from .scan_service import ScanService
from .file_service import FileService
from .duplicate_service import DuplicateService

__all__ = ["ScanService", "FileService", "DuplicateService"]
