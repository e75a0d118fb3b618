"""
Unit tests for CandidateGrouperImpl.
Verifies size, name and modification-day bucketing with proper filtering.
"""
import os
import time

from dupescan.core import CandidateGrouperImpl
from dupescan.core.models import FileRecord


class TestCandidateGrouper:
    """Test cheap-key bucketing."""

    def test_groups_by_size_filters_single_files(self):
        """
        group_by_size returns ONLY groups with 2+ files of same size.
        Single files are filtered out (not considered duplicates).
        """
        records = [
            FileRecord(path="/a.txt", size=1024),
            FileRecord(path="/b.txt", size=1024),  # Same size → group
            FileRecord(path="/c.txt", size=2048),  # Single file → filtered
        ]

        size_groups = CandidateGrouperImpl().group_by_size(records)

        assert list(size_groups) == [1024]
        assert [r.path for r in size_groups[1024]] == ["/a.txt", "/b.txt"]

    def test_buckets_keep_first_seen_order(self):
        """Buckets and their members follow the order of the input list."""
        records = [
            FileRecord(path="/1", size=20),
            FileRecord(path="/2", size=10),
            FileRecord(path="/3", size=20),
            FileRecord(path="/4", size=10),
        ]
        size_groups = CandidateGrouperImpl().group_by_size(records)

        assert list(size_groups) == [20, 10]
        assert [r.path for r in size_groups[10]] == ["/2", "/4"]

    def test_zero_byte_files_are_grouped(self):
        """Empty files are regular candidates of size 0."""
        records = [FileRecord(path="/e1", size=0), FileRecord(path="/e2", size=0)]
        assert 0 in CandidateGrouperImpl().group_by_size(records)

    def test_collect_records_skips_failed_stat(self, test_files, faulty_fs):
        """Files whose stat fails are excluded from all further processing."""
        vanished = str(test_files["dup1_b"])
        grouper = CandidateGrouperImpl(faulty_fs(unstatable=[vanished]))
        paths = [str(test_files["dup1_a"]), vanished, str(test_files["sub_dup"])]

        records = grouper.collect_records(paths)

        assert [r.path for r in records] == [str(test_files["dup1_a"]), str(test_files["sub_dup"])]
        assert all(r.size == 1024 for r in records)

    def test_groups_by_name_ignores_directory(self):
        """Same base name in different directories forms a group; case matters."""
        paths = ["/x/report.txt", "/y/report.txt", "/z/Report.txt", "/z/other.txt"]
        groups = CandidateGrouperImpl().group_by_name(paths)

        assert groups == {"report.txt": ["/x/report.txt", "/y/report.txt"]}

    def test_groups_by_modification_day(self, temp_dir):
        """Files modified on the same local day share a bucket."""
        now = time.time()
        same_day = [temp_dir / "a.txt", temp_dir / "b.txt"]
        older = temp_dir / "c.txt"
        for p in same_day + [older]:
            p.write_bytes(b"x")
        for p in same_day:
            os.utime(p, (now, now))
        week_ago = now - 7 * 24 * 3600
        os.utime(older, (week_ago, week_ago))

        grouper = CandidateGrouperImpl()
        records = grouper.collect_records([str(p) for p in same_day + [older]])
        groups = grouper.group_by_date(records)

        assert len(groups) == 1
        day, members = next(iter(groups.items()))
        assert day == CandidateGrouperImpl.day_key(FileRecord(path="/a", size=0, mtime=now))
        assert [r.path for r in members] == [str(p) for p in same_day]

    def test_day_key_format_and_missing_mtime(self):
        """Day keys are ISO dates; records without mtime have no key."""
        key = CandidateGrouperImpl.day_key(FileRecord(path="/a", size=0, mtime=time.time()))
        assert len(key) == 10 and key[4] == "-" and key[7] == "-"
        assert CandidateGrouperImpl.day_key(FileRecord(path="/a", size=0)) is None
