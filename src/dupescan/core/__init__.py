"""
Core scanning engine — walker, grouper, concurrent hasher, resolver and sessions.

This package contains the performance-critical foundation of dupescan:
- DirectoryWalkerImpl: recursive traversal that tolerates unreadable subtrees
- CandidateGrouperImpl: size, name and modification-day bucketing
- HasherImpl + ConcurrentHasher: streaming xxHash3 digests on a cancellable thread pool
- ExactResolver / ContentResolver: hash buckets → duplicate groups (+ text refinement)
- Mode strategies: one `find_groups` entry point per ScanMode
- ScanSession: cancellation token, counters and lifecycle

All components are pure Python with no GUI dependencies — suitable for CLI and server usage.
"""

from .errors import (
    ScanError, FileSystemError, NotAccessibleError, NotFoundError, DecodeError,
    FatalScanError, SessionStateError)
from .filesystem import LocalFileSystem
from .walker import DirectoryWalkerImpl
from .grouper import CandidateGrouperImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, ConcurrentHasher, HashingConfig
from .resolver import ExactResolver, ContentResolver
from .stages import (
    ExactStrategy, ContentStrategy, SizeOnlyStrategy, FilenameStrategy, DateStrategy,
    build_strategy)
from .session import ScanSession
from .models import (
    FileRecord, DuplicateGroup, ScanMode, ScanProgress, ScanReport, ScanRequest,
    ScanStats, SessionState)

__all__ = [
    "ScanError",
    "FileSystemError",
    "NotAccessibleError",
    "NotFoundError",
    "DecodeError",
    "FatalScanError",
    "SessionStateError",
    "LocalFileSystem",
    "DirectoryWalkerImpl",
    "CandidateGrouperImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "ConcurrentHasher",
    "HashingConfig",
    "ExactResolver",
    "ContentResolver",
    "ExactStrategy",
    "ContentStrategy",
    "SizeOnlyStrategy",
    "FilenameStrategy",
    "DateStrategy",
    "build_strategy",
    "ScanSession",
    "FileRecord",
    "DuplicateGroup",
    "ScanMode",
    "ScanProgress",
    "ScanReport",
    "ScanRequest",
    "ScanStats",
    "SessionState",
]
