"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/interfaces.py

Defines core interfaces (Protocols) used throughout the scanning pipeline.
Structural typing keeps the pipeline independent of the concrete filesystem,
hash function and mode implementations.

Key Components:
---------------
- FileSystem: collaborator for listing, stat'ing and reading files.
- HashAlgorithm: streaming hash function factory (e.g., xxHash3, BLAKE2).
- Hasher: computes a content digest for one path.
- DirectoryWalker: recursive traversal producing a flat file list.
- CandidateGrouper: cheap-key bucketing (size, name, day).
- ModeStrategy: one equivalence mode turning a file list into duplicate groups.
"""

from dataclasses import dataclass
from typing import Protocol, List, Dict, BinaryIO, Optional, Callable, TYPE_CHECKING
import os

from dupescan.core.models import FileRecord, DuplicateGroup, ScanProgress, ScanStats

if TYPE_CHECKING:
    from dupescan.core.session import ScanSession


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""
    path: str
    is_dir: bool
    is_file: bool


ProgressCallback = Callable[[ScanProgress], None]


# ===== Interfaces =====

class FileSystem(Protocol):
    """
    Filesystem collaborator consumed by the pipeline.

    Implementations raise the errors from dupescan.core.errors:
    list_dir → NotAccessibleError; stat → NotFoundError / NotAccessibleError;
    open_read_stream → NotAccessibleError; read_text → DecodeError.
    """
    def list_dir(self, path: str) -> List[DirEntry]: ...
    def stat(self, path: str) -> os.stat_result: ...
    def open_read_stream(self, path: str) -> BinaryIO: ...
    def read_text(self, path: str) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in different hashing functions without affecting
    the rest of the pipeline.
    """
    def new(self):
        """Return a fresh hash object exposing update() and hexdigest()."""
        ...

    def hash_text(self, text: str) -> str:
        """Hex digest of a text value."""
        ...


class Hasher(Protocol):
    """Interface for computing a full content digest of a file."""
    def compute_digest(self, path: str) -> str: ...


class DirectoryWalker(Protocol):
    """Interface for recursive directory traversal."""
    def walk(self, root_paths: List[str]) -> List[str]:
        """Return every regular file below the roots, in traversal order."""
        ...


class CandidateGrouper(Protocol):
    """
    Interface for bucketing files by a cheap key.
    Every method returns only buckets with 2+ members.
    """
    def collect_records(self, paths: List[str]) -> List[FileRecord]: ...
    def group_by_size(self, records: List[FileRecord]) -> Dict[int, List[FileRecord]]: ...
    def group_by_name(self, paths: List[str]) -> Dict[str, List[str]]: ...
    def group_by_date(self, records: List[FileRecord]) -> Dict[str, List[FileRecord]]: ...


class ModeStrategy(Protocol):
    """
    One equivalence mode. Implementations share the same entry point so the
    command layer never branches on the mode itself.
    """
    def find_groups(
        self,
        files: List[str],
        session: "ScanSession",
        progress_callback: Optional[ProgressCallback] = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        """
        Turn the walked file list into final duplicate groups.

        Args:
            files: Flat list of regular files produced by the walker.
            session: Session providing the cancellation flag and counters.
            progress_callback: Receives ScanProgress events (hash modes only).
            stats: Optional collector for per-stage timings.

        Returns:
            Duplicate groups, each with 2+ members.
        """
        ...


class Resolver(Protocol):
    """Turns hash buckets into final groups."""
    def resolve(self, hash_buckets: Dict[str, List[str]]) -> List[DuplicateGroup]: ...

