"""
dupescan — concurrent duplicate file finder.

Core features:
- Five scan modes: EXACT (size + full xxHash3 digest), CONTENT (EXACT + text comparison),
  SIZE_ONLY, FILENAME and DATE (same modification day)
- Cancellable scan sessions with live hashing progress
- Safe removal of candidates to the system trash (via send2trash)
- Optional Qt worker with PySide6 (install with [gui] extra)
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dupescan")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "1.0.0"

# Public API: only what users should import directly
from dupescan.commands import ScanCommand, scan_directories
from dupescan.core import (
    ScanRequest, ScanMode, ScanReport, ScanProgress, DuplicateGroup, ScanSession, SessionState)
from dupescan.utils.convert_utils import ConvertUtils
from dupescan.services import ScanService, FileService, DuplicateService

__all__ = [
    "ScanCommand",
    "scan_directories",
    "ScanRequest",
    "ScanMode",
    "ScanReport",
    "ScanProgress",
    "DuplicateGroup",
    "ScanSession",
    "SessionState",
    "ConvertUtils",
    "ScanService",
    "FileService",
    "DuplicateService",
    "__version__",
]
