"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Recursive directory traversal.
Features:
- Walks several roots, preserving root order and OS entry order
- Depth-first: a subdirectory's files appear where its entry was listed
- Skips directories that cannot be listed instead of aborting
- Iterative, so deep trees never hit the recursion limit
"""

from typing import List, Optional, Iterator
import time
import logging

logger = logging.getLogger(__name__)

# Local imports
from dupescan.core.errors import NotAccessibleError
from dupescan.core.filesystem import LocalFileSystem
from dupescan.core.interfaces import DirectoryWalker, FileSystem, DirEntry


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Lists regular files below a set of root directories.

    Attributes:
        fs: Filesystem collaborator used for listing
        skipped_dirs: Directories that could not be listed during the last walk
    """

    def __init__(self, fs: Optional[FileSystem] = None):
        self.fs = fs or LocalFileSystem()
        self.skipped_dirs: List[str] = []

    def walk(self, root_paths: List[str]) -> List[str]:
        """
        Return every regular file reachable from root_paths.
        Unreadable or missing roots are skipped like any other directory.
        """
        logger.debug(f"Starting walk of {len(root_paths)} root(s)")
        start_time = time.time()
        self.skipped_dirs = []

        found_files = []
        for root in root_paths:
            found_files.extend(self._walk_root(root))

        elapsed_time = time.time() - start_time
        logger.debug(f"Walk finished in {elapsed_time:.2f} seconds: "
                     f"{len(found_files)} files, {len(self.skipped_dirs)} skipped directories")
        return found_files

    def _walk_root(self, root: str) -> Iterator[str]:
        # Stack of entry iterators; the top one is the directory being listed.
        stack = []
        entries = self._list(root)
        if entries is not None:
            stack.append(iter(entries))

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            if entry.is_file:
                yield entry.path
            elif entry.is_dir:
                children = self._list(entry.path)
                if children is not None:
                    stack.append(iter(children))

    def _list(self, path: str) -> Optional[List[DirEntry]]:
        """List a directory, or return None if it cannot be listed."""
        try:
            return self.fs.list_dir(path)
        except NotAccessibleError as e:
            logger.debug(f"Skipping unreadable directory {path}: {e.reason}")
            self.skipped_dirs.append(path)
            return None
