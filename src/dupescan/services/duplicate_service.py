"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Pure operations on scan results: keeping groups consistent after deletions
and estimating reclaimable space.
"""
from typing import Iterable, List, Tuple

from dupescan.core.models import DuplicateGroup


class DuplicateService:
    @staticmethod
    def remove_files_from_groups(groups: List[DuplicateGroup], file_paths: Iterable[str]) -> List[DuplicateGroup]:
        """
        Removes the given paths from every duplicate group.

        Groups that contain fewer than 2 files after removal are discarded.

        Args:
            groups: Duplicate groups to update.
            file_paths: Paths of files that were removed.

        Returns:
            Updated list of duplicate groups (input groups are not modified).
        """
        removed = set(file_paths)
        updated_groups = []
        for group in groups:
            remaining = [f for f in group.files if f not in removed]
            if len(remaining) >= 2:
                updated_groups.append(DuplicateGroup(hash=group.hash, size=group.size, files=remaining))
        return updated_groups

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroup]) -> Tuple[List[str], List[DuplicateGroup]]:
        """
        Keeps the first file of every group (the conventional original) and
        marks the rest as removal candidates.

        Returns:
            - List of candidate paths
            - Updated list of duplicate groups
        """
        candidates = [path for group in groups for path in group.files[1:]]
        return candidates, DuplicateService.remove_files_from_groups(groups, candidates)

    @staticmethod
    def reclaimable_bytes(groups: List[DuplicateGroup]) -> int:
        """Space freed by keeping one file per group: Σ (members − 1) × size."""
        return sum((len(group.files) - 1) * group.size for group in groups if group.files)

    @staticmethod
    def total_files(groups: List[DuplicateGroup]) -> int:
        return sum(len(group.files) for group in groups)
