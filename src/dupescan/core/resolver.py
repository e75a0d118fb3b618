"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Turns hash buckets into final duplicate groups.

ExactResolver      : one group per hash bucket
ContentResolver    : same, plus a text-equality refinement for buckets made
                     only of recognised text files
"""

from typing import List, Dict, Optional, FrozenSet
from collections import defaultdict
import logging

from dupescan.core.errors import FileSystemError
from dupescan.core.filesystem import LocalFileSystem
from dupescan.core.hasher import HashingConfig, XXHashAlgorithmImpl
from dupescan.core.interfaces import Resolver, FileSystem, HashAlgorithm
from dupescan.core.models import DuplicateGroup, FileRecord

logger = logging.getLogger(__name__)


class ExactResolver(Resolver):
    def __init__(self, fs: Optional[FileSystem] = None):
        self.fs = fs or LocalFileSystem()

    def resolve(self, hash_buckets: Dict[str, List[str]]) -> List[DuplicateGroup]:
        return [
            self._hash_group(digest, paths)
            for digest, paths in hash_buckets.items()
            if len(paths) >= 2
        ]

    def _hash_group(self, key: str, paths: List[str]) -> DuplicateGroup:
        return DuplicateGroup(hash=key, size=self.reported_size(paths[0]), files=list(paths))

    def reported_size(self, path: str) -> int:
        """Best-effort size of a group's first member; 0 if it cannot be stat'ed."""
        try:
            return self.fs.stat(path).st_size
        except FileSystemError as e:
            logger.debug(f"Could not re-stat {path}: {e.reason}")
            return 0


class ContentResolver(ExactResolver):
    """
    Hash buckets whose members all carry a text extension are split again by
    exact text equality. Any bucket that is not all-text, or where a single
    member fails to read as text, is kept whole as a hash-based group.
    """

    def __init__(
        self,
        fs: Optional[FileSystem] = None,
        algorithm: Optional[HashAlgorithm] = None,
        text_extensions: FrozenSet[str] = HashingConfig.TEXT_EXTENSIONS
    ):
        super().__init__(fs)
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.text_extensions = frozenset(ext.lower() for ext in text_extensions)

    def resolve(self, hash_buckets: Dict[str, List[str]]) -> List[DuplicateGroup]:
        groups = []
        for digest, paths in hash_buckets.items():
            if len(paths) < 2:
                continue
            refined = self._refine(paths)
            if refined is None:
                groups.append(self._hash_group(digest, paths))
            else:
                groups.extend(refined)
        return groups

    def is_text_file(self, path: str) -> bool:
        return FileRecord(path=path, size=0).extension in self.text_extensions

    def _refine(self, paths: List[str]) -> Optional[List[DuplicateGroup]]:
        """
        Sub-partition a bucket by text content.
        Returns None when the bucket must fall back to a single hash group.
        """
        if not all(self.is_text_file(p) for p in paths):
            return None

        by_text: Dict[str, List[str]] = defaultdict(list)
        for path in paths:
            try:
                text = self.fs.read_text(path)
            except FileSystemError as e:
                logger.debug(f"Text comparison unavailable for {path} ({e.reason}); "
                             f"keeping its bucket as a hash group")
                return None
            by_text[text].append(path)

        return [
            DuplicateGroup(
                hash=self.algorithm.hash_text(text),
                size=self.reported_size(members[0]),
                files=members,
            )
            for text, members in by_text.items()
            if len(members) >= 2
        ]
