"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Cheap-key bucketing of walked files: by size, by base name, by modification day.
Every key is computed once per file, so buckets never overlap.
"""

from datetime import datetime
from typing import List, Dict, Any, Callable, Optional, TypeVar
from collections import defaultdict
import os
import logging

from dupescan.core.errors import NotAccessibleError, NotFoundError
from dupescan.core.filesystem import LocalFileSystem
from dupescan.core.interfaces import CandidateGrouper, FileSystem
from dupescan.core.models import FileRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CandidateGrouperImpl(CandidateGrouper):
    """
    Concrete CandidateGrouper.
    Uses an injected FileSystem for stat calls so failures can be simulated in tests.
    """

    def __init__(self, fs: Optional[FileSystem] = None):
        self.fs = fs or LocalFileSystem()

    def collect_records(self, paths: List[str]) -> List[FileRecord]:
        """
        Stat every path once. Files whose stat fails are left out.
        """
        records = []
        for path in paths:
            try:
                st = self.fs.stat(path)
            except (NotFoundError, NotAccessibleError) as e:
                logger.debug(f"Could not stat {path}: {e.reason}")
                continue
            records.append(FileRecord(path=path, size=st.st_size, mtime=st.st_mtime))

        skipped = len(paths) - len(records)
        if skipped:
            logger.debug(f"Excluded {skipped} file(s) that could not be stat'ed")
        return records

    def group_by_size(self, records: List[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups files by their size in bytes."""
        return self._group_by(records, lambda r: r.size)

    def group_by_name(self, paths: List[str]) -> Dict[str, List[str]]:
        """Groups paths by case-sensitive base name. No stat needed."""
        return self._group_by(paths, os.path.basename)

    def group_by_date(self, records: List[FileRecord]) -> Dict[str, List[FileRecord]]:
        """Groups files by the local calendar day of their modification time."""
        return self._group_by(records, self.day_key)

    @staticmethod
    def day_key(record: FileRecord) -> Optional[str]:
        """ISO date (YYYY-MM-DD) of the local day the file was last modified."""
        if record.mtime is None:
            return None
        return datetime.fromtimestamp(record.mtime).date().isoformat()

    @staticmethod
    def _group_by(items: List[T], key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """
        Helper method to group items by any computed key.
        Args:
            items: Files (paths or records) to group
            key_func: Function that computes a hashable key; None excludes the item
        Returns:
            Dict[key, List] holding only buckets with 2+ members, in first-seen order
        """
        groups = defaultdict(list)
        for item in items:
            key = key_func(item)
            if key is not None:
                groups[key].append(item)

        return {key: group for key, group in groups.items() if len(group) >= 2}
