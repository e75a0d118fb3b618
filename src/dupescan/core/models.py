"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory scanning and duplicate detection.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, Any
import os
import logging
from enum import Enum

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class ScanMode(Enum):
    """
    Equivalence strategy selected by the caller.
    """
    EXACT = "exact"
    CONTENT = "content"
    SIZE_ONLY = "sizeOnly"
    FILENAME = "filename"
    DATE = "date"

    @classmethod
    def _missing_(cls, value):
        # Accept CLI-style spellings: "size-only", "SIZE_ONLY", "name", ...
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace("-", "").replace("_", "")
        aliases = {
            "exact": cls.EXACT,
            "content": cls.CONTENT,
            "sizeonly": cls.SIZE_ONLY,
            "size": cls.SIZE_ONLY,
            "filename": cls.FILENAME,
            "name": cls.FILENAME,
            "date": cls.DATE,
        }
        return aliases.get(normalized)

    @property
    def is_hash_mode(self) -> bool:
        """True for modes that confirm candidates by hashing file content."""
        return self in (ScanMode.EXACT, ScanMode.CONTENT)

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            ScanMode.EXACT: "Exact",
            ScanMode.CONTENT: "Content",
            ScanMode.SIZE_ONLY: "Size only",
            ScanMode.FILENAME: "Filename",
            ScanMode.DATE: "Modification date",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class SessionState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


class Stage(str, Enum):
    WALK = "walk"
    GROUP = "group"
    HASH = "hash"
    RESOLVE = "resolve"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileRecord:
    """
    A regular file that was successfully stat'ed.
    Files whose stat call failed never get a record.
    """
    path: str
    size: int  # in bytes
    mtime: Optional[float] = None  # POSIX timestamp
    name: Optional[str] = None
    extension: Optional[str] = None

    def __post_init__(self):
        """Automatically extract basename and extension from path if not provided."""
        if self.name is None:
            self.name = os.path.basename(self.path)

        if self.extension is None:
            _, ext = os.path.splitext(self.name)
            self.extension = ext.lower()  # ".TXT" → ".txt"

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    A set of two or more paths judged equivalent under the active mode.
    The first path is conventionally treated as the original.

    `hash` holds the group key: a content digest, the stringified size,
    the file name or an ISO date, depending on the mode.
    """
    hash: str
    size: int
    files: List[str]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "size": self.size,
            "files": list(self.files),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DuplicateGroup':
        return cls(
            hash=str(data["hash"]),
            size=int(data.get("size", 0)),
            files=list(data.get("files", [])),
        )

    def __repr__(self):
        return f"<DuplicateGroup hash={self.hash}, size={self.size}, count={len(self.files)}>"


@dataclass
class ScanProgress:
    """Progress event emitted while hashing."""
    total_files_found: int
    total_to_hash: int
    hashed: int
    current_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFilesFound": self.total_files_found,
            "totalToHash": self.total_to_hash,
            "hashed": self.hashed,
            "currentFile": self.current_file,
        }


class ScanStats:
    """
    Statistics collected during a scan.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception as e:
                logger.warning(f"Error in stats event handler: {e}")

    def print_summary(self) -> str:
        labels = {
            Stage.WALK.value: "📁 Files walked",
            Stage.GROUP.value: "📏 Candidate buckets",
            Stage.HASH.value: "🔍 Hash buckets",
            Stage.RESOLVE.value: "✅ Duplicate groups",
        }

        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage, stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class ScanReport:
    """
    Terminal event of a scan. Exactly one is produced per session.
    """
    success: bool
    cancelled: bool = False
    duplicates: List[DuplicateGroup] = field(default_factory=list)
    error: Optional[str] = None
    stats: Optional[ScanStats] = field(default=None, repr=False, compare=False)

    @classmethod
    def failed(cls, error: str, stats: Optional[ScanStats] = None) -> 'ScanReport':
        return cls(success=False, cancelled=False, duplicates=[], error=error, stats=stats)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": self.success,
            "cancelled": self.cancelled,
            "duplicates": [group.to_dict() for group in self.duplicates],
        }
        if not self.success:
            data["error"] = self.error or "Unknown error"
        return data


"""
DTO for scan requests with built-in validation.
Interface-agnostic — used by the CLI, the background service and the GUI worker.
"""

@dataclass
class ScanRequest:
    """Directories to scan and the equivalence mode to apply."""
    root_paths: List[str]
    mode: ScanMode = ScanMode.EXACT

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.root_paths, str):
            self.root_paths = [self.root_paths]

        self.root_paths = [str(p) for p in self.root_paths if str(p).strip()]
        if not self.root_paths:
            raise ValueError("At least one root directory is required")

        if not isinstance(self.mode, ScanMode):
            try:
                self.mode = ScanMode(self.mode)
            except ValueError:
                valid = ", ".join(m.value for m in ScanMode)
                raise ValueError(f"Invalid scan mode: '{self.mode}'. Valid options: {valid}") from None

    @staticmethod
    def from_strings(root_paths: List[str], mode: str = "exact") -> 'ScanRequest':
        """
        Factory method to create a request from raw user input.
        Paths are stripped and made absolute; mode accepts CLI aliases.
        """
        cleaned = [
            os.path.abspath(os.path.expanduser(p.strip()))
            for p in root_paths if p and p.strip()
        ]
        return ScanRequest(root_paths=cleaned, mode=mode)
