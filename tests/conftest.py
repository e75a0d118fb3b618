"""
Shared fixtures for scanning engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional
import sys

# Add src/ to sys.path so 'dupescan' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dupescan.core.errors import NotAccessibleError, NotFoundError, DecodeError  # noqa: E402
from dupescan.core.filesystem import LocalFileSystem  # noqa: E402


class FaultyFileSystem(LocalFileSystem):
    """
    Local filesystem that fails on selected paths, to simulate permission
    problems and files vanishing between stages.
    """

    def __init__(
            self,
            unlistable: Iterable[str] = (),
            unstatable: Iterable[str] = (),
            unreadable: Iterable[str] = (),
            undecodable: Iterable[str] = ()
    ):
        self.unlistable = {str(p) for p in unlistable}
        self.unstatable = {str(p) for p in unstatable}
        self.unreadable = {str(p) for p in unreadable}
        self.undecodable = {str(p) for p in undecodable}

    def list_dir(self, path):
        if str(path) in self.unlistable:
            raise NotAccessibleError(str(path), "Permission denied")
        return super().list_dir(path)

    def stat(self, path):
        if str(path) in self.unstatable:
            raise NotFoundError(str(path), "No such file or directory")
        return super().stat(path)

    def open_read_stream(self, path):
        if str(path) in self.unreadable:
            raise NotAccessibleError(str(path), "Permission denied")
        return super().open_read_stream(path)

    def read_text(self, path):
        if str(path) in self.undecodable:
            raise DecodeError(str(path), "invalid start byte")
        return super().read_text(path)


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - 3 identical files of 1KB 'A' (one of them in a subdirectory)
    - 2 identical files of 2KB 'B'
    - 1 file of 1KB 'E' (same size as the 'A' files, different content)
    - 2 unique files (unique sizes)
    - 1 empty file
    """
    files = {}

    # Duplicate group #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Same size as group #1, different content: must be pruned by hashing
    files["same_size"] = temp_dir / "same_size.bin"
    files["same_size"].write_bytes(b"E" * 1024)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Subdirectory with duplicates
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)  # Same as dup1_a/b

    return files


@pytest.fixture
def faulty_fs():
    """Factory for FaultyFileSystem instances."""
    def _make(**kwargs) -> FaultyFileSystem:
        return FaultyFileSystem(**kwargs)
    return _make


def group_file_sets(groups) -> set:
    """Order-independent view of duplicate groups (OS listing order is not fixed)."""
    return {frozenset(g.files) for g in groups}
