"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Scan modes as strategy objects sharing one `find_groups` entry point.

CLASS HIERARCHY
---------------
ModeStrategyBase   : holds the grouper, shared size bucketing and stats helper
SizeOnlyStrategy   : size buckets are the final groups
FilenameStrategy   : base-name buckets are the final groups
DateStrategy       : modification-day buckets are the final groups
HashStrategyBase   : size buckets → concurrent hashing → resolver
ExactStrategy      : HashStrategyBase + ExactResolver
ContentStrategy    : HashStrategyBase + ContentResolver (text refinement)

STAGE CONTRACTS
---------------
• Grouping modes never hash and never emit progress events
• Hash modes emit one initial progress event (hashed = 0), then one per
  attempted file from the concurrent hasher
• Cancellation is observed only by the hashing pool; whatever was hashed
  before cancellation is still resolved into groups
"""

import time
from typing import List, Dict, Optional, Type
import logging

from dupescan.core.grouper import CandidateGrouperImpl
from dupescan.core.hasher import ConcurrentHasher, HasherImpl
from dupescan.core.interfaces import ModeStrategy, CandidateGrouper, FileSystem, ProgressCallback, Resolver
from dupescan.core.models import DuplicateGroup, FileRecord, ScanMode, ScanProgress, ScanStats, Stage
from dupescan.core.resolver import ExactResolver, ContentResolver
from dupescan.core.session import ScanSession

logger = logging.getLogger(__name__)


#=============================
# Base Classes
#=============================
class ModeStrategyBase(ModeStrategy):
    def __init__(self, grouper: Optional[CandidateGrouper] = None):
        self.grouper = grouper or CandidateGrouperImpl()

    def size_buckets(self, files: List[str]) -> Dict[int, List[FileRecord]]:
        """Shared first step of every size-based mode."""
        return self.grouper.group_by_size(self.grouper.collect_records(files))

    @staticmethod
    def _update_stats(
        stats: Optional[ScanStats],
        stage: Stage,
        started: float,
        groups_found: int,
        files_processed: int
    ) -> None:
        if stats is not None:
            stats.update_stage(
                stage_name=stage.value,
                groups_found=groups_found,
                files_processed=files_processed,
                duration=time.time() - started,
            )


# =============================
# Grouping-only modes
# =============================
class SizeOnlyStrategy(ModeStrategyBase):
    def find_groups(
        self,
        files: List[str],
        session: ScanSession,
        progress_callback: Optional[ProgressCallback] = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        started = time.time()
        groups = [
            DuplicateGroup(hash=str(size), size=size, files=[r.path for r in records])
            for size, records in self.size_buckets(files).items()
        ]
        self._update_stats(stats, Stage.GROUP, started, len(groups), sum(len(g.files) for g in groups))
        return groups


class FilenameStrategy(ModeStrategyBase):
    def find_groups(
        self,
        files: List[str],
        session: ScanSession,
        progress_callback: Optional[ProgressCallback] = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        started = time.time()
        # Members may legitimately differ in size, so no size is reported
        groups = [
            DuplicateGroup(hash=name, size=0, files=paths)
            for name, paths in self.grouper.group_by_name(files).items()
        ]
        self._update_stats(stats, Stage.GROUP, started, len(groups), sum(len(g.files) for g in groups))
        return groups


class DateStrategy(ModeStrategyBase):
    def find_groups(
        self,
        files: List[str],
        session: ScanSession,
        progress_callback: Optional[ProgressCallback] = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        started = time.time()
        records = self.grouper.collect_records(files)
        groups = [
            DuplicateGroup(hash=day, size=0, files=[r.path for r in day_records])
            for day, day_records in self.grouper.group_by_date(records).items()
        ]
        self._update_stats(stats, Stage.GROUP, started, len(groups), sum(len(g.files) for g in groups))
        return groups


# =============================
# Hashing modes
# =============================
class HashStrategyBase(ModeStrategyBase):
    """
    Size bucketing, then full-content hashing of every file that shares its
    size with at least one other file, then resolution of hash buckets.
    """

    resolver_cls: Type[ExactResolver] = ExactResolver

    def __init__(
        self,
        grouper: Optional[CandidateGrouper] = None,
        hasher: Optional[ConcurrentHasher] = None,
        resolver: Optional[Resolver] = None
    ):
        super().__init__(grouper)
        self.hasher = hasher or ConcurrentHasher()
        self.resolver = resolver or self.resolver_cls()

    def find_groups(
        self,
        files: List[str],
        session: ScanSession,
        progress_callback: Optional[ProgressCallback] = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        started = time.time()
        size_buckets = self.size_buckets(files)
        files_to_hash = [r.path for records in size_buckets.values() for r in records]
        session.files_to_hash = len(files_to_hash)
        self._update_stats(stats, Stage.GROUP, started, len(size_buckets), len(files_to_hash))

        if not files_to_hash:
            logger.debug("No files share a size; nothing to hash")
            return []

        if progress_callback:
            progress_callback(ScanProgress(
                total_files_found=len(files),
                total_to_hash=len(files_to_hash),
                hashed=0,
                current_file=None,
            ))

        started = time.time()
        hash_buckets = self.hasher.hash_files(
            files_to_hash,
            session,
            total_files_found=len(files),
            progress_callback=progress_callback,
        )
        self._update_stats(stats, Stage.HASH, started, len(hash_buckets),
                           sum(len(p) for p in hash_buckets.values()))

        started = time.time()
        groups = self.resolver.resolve(hash_buckets)
        self._update_stats(stats, Stage.RESOLVE, started, len(groups), sum(len(g.files) for g in groups))
        return groups


class ExactStrategy(HashStrategyBase):
    resolver_cls = ExactResolver


class ContentStrategy(HashStrategyBase):
    resolver_cls = ContentResolver


STRATEGIES: Dict[ScanMode, Type[ModeStrategyBase]] = {
    ScanMode.EXACT: ExactStrategy,
    ScanMode.CONTENT: ContentStrategy,
    ScanMode.SIZE_ONLY: SizeOnlyStrategy,
    ScanMode.FILENAME: FilenameStrategy,
    ScanMode.DATE: DateStrategy,
}


def build_strategy(
    mode: ScanMode,
    fs: Optional[FileSystem] = None,
    pool_size: Optional[int] = None
) -> ModeStrategyBase:
    """
    Create the strategy for a mode, wiring every component to the same
    filesystem collaborator.
    """
    grouper = CandidateGrouperImpl(fs)
    strategy_cls = STRATEGIES[mode]

    if issubclass(strategy_cls, HashStrategyBase):
        hasher = ConcurrentHasher(HasherImpl(fs=fs), pool_size=pool_size)
        return strategy_cls(grouper, hasher=hasher, resolver=strategy_cls.resolver_cls(fs))
    return strategy_cls(grouper)
