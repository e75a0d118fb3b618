"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filesystem.py
Local filesystem collaborator.

Wraps os/io calls and translates OSError / UnicodeDecodeError into the
scan error taxonomy so the pipeline never deals with raw OS exceptions.
"""

import os
from typing import List, BinaryIO
import logging

logger = logging.getLogger(__name__)

from dupescan.core.errors import NotAccessibleError, NotFoundError, DecodeError
from dupescan.core.interfaces import FileSystem, DirEntry


class LocalFileSystem(FileSystem):
    """
    FileSystem implementation backed by the local OS.
    Symbolic links are reported as neither files nor directories.
    """

    def list_dir(self, path: str) -> List[DirEntry]:
        """List entries of a directory in OS order."""
        entries = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                        is_file = entry.is_file(follow_symlinks=False)
                    except OSError as e:
                        logger.debug(f"Could not determine type of {entry.path}: {e}")
                        continue
                    entries.append(DirEntry(path=entry.path, is_dir=is_dir, is_file=is_file))
        except OSError as e:
            raise NotAccessibleError(path, e.strerror or str(e)) from e
        return entries

    def stat(self, path: str) -> os.stat_result:
        try:
            return os.stat(path)
        except FileNotFoundError as e:
            raise NotFoundError(path, e.strerror) from e
        except OSError as e:
            raise NotAccessibleError(path, e.strerror or str(e)) from e

    def open_read_stream(self, path: str) -> BinaryIO:
        try:
            return open(path, "rb")
        except OSError as e:
            raise NotAccessibleError(path, e.strerror or str(e)) from e

    def read_text(self, path: str) -> str:
        """Read the whole file as strict UTF-8 text."""
        try:
            with open(path, "r", encoding="utf-8", errors="strict", newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise DecodeError(path, str(e)) from e
        except OSError as e:
            raise NotAccessibleError(path, e.strerror or str(e)) from e
