"""
Tests for the mode strategies.
Each test pins down one observable property of a scan mode.
"""
import pytest

from dupescan.core import (
    ScanSession, ScanMode, ScanStats, ExactStrategy, ContentStrategy, SizeOnlyStrategy,
    FilenameStrategy, DateStrategy, build_strategy, ContentResolver)
from conftest import group_file_sets


def _paths(*paths):
    return [str(p) for p in paths]


class TestGroupingModes:
    """Modes that never hash."""

    def test_size_only_groups_equal_sizes(self, temp_dir):
        a, b, c = temp_dir / "a", temp_dir / "b", temp_dir / "c"
        a.write_bytes(b"1" * 10)
        b.write_bytes(b"2" * 10)
        c.write_bytes(b"3" * 20)
        session = ScanSession()
        events = []

        groups = SizeOnlyStrategy().find_groups(_paths(a, b, c), session, progress_callback=events.append)

        assert len(groups) == 1
        assert groups[0].hash == "10"
        assert groups[0].size == 10
        assert groups[0].files == _paths(a, b)
        assert events == []
        assert session.files_hashed == 0

    def test_filename_groups_across_directories(self, temp_dir):
        """Same name, different sizes and contents → one group with size 0."""
        (temp_dir / "x").mkdir()
        (temp_dir / "y").mkdir()
        first, second = temp_dir / "x" / "report.txt", temp_dir / "y" / "report.txt"
        first.write_bytes(b"short")
        second.write_bytes(b"a much longer report")

        groups = FilenameStrategy().find_groups(_paths(first, second), ScanSession())

        assert [(g.hash, g.size, g.files) for g in groups] == [("report.txt", 0, _paths(first, second))]

    def test_date_groups_same_day(self, test_files):
        """Freshly written files share today's modification day."""
        paths = _paths(test_files["dup1_a"], test_files["unique1"])
        groups = DateStrategy().find_groups(paths, ScanSession())

        assert len(groups) == 1
        assert groups[0].size == 0
        assert len(groups[0].hash) == 10
        assert groups[0].files == paths


class TestHashModes:
    """Modes that confirm size buckets by hashing."""

    def test_same_size_different_content_is_not_duplicate(self, temp_dir):
        a, b = temp_dir / "a.txt", temp_dir / "b.txt"
        a.write_bytes(b"AAAAAAAAAA")
        b.write_bytes(b"BBBBBBBBBB")
        session = ScanSession()

        groups = ExactStrategy().find_groups(_paths(a, b), session)

        assert groups == []
        assert session.files_to_hash == 2
        assert session.files_hashed == 2

    def test_identical_files_form_group(self, test_files):
        paths = _paths(*test_files.values())
        groups = ExactStrategy().find_groups(paths, ScanSession())

        assert group_file_sets(groups) == {
            frozenset(_paths(test_files["dup1_a"], test_files["dup1_b"], test_files["sub_dup"])),
            frozenset(_paths(test_files["dup2_a"], test_files["dup2_b"])),
        }
        sizes = {g.files[0]: g.size for g in groups}
        assert sorted(sizes.values()) == [1024, 2048]

    def test_only_size_matches_are_hashed(self, test_files):
        """Files with a unique size are never hashed."""
        session = ScanSession()
        ExactStrategy().find_groups(_paths(*test_files.values()), session)

        # 1KB: dup1_a, dup1_b, sub_dup, same_size; 2KB: dup2_a, dup2_b
        assert session.files_to_hash == 6
        assert session.files_hashed == 6

    def test_no_equal_sizes_means_no_work(self, test_files):
        paths = _paths(test_files["dup1_a"], test_files["dup2_a"], test_files["unique1"])
        session = ScanSession()
        events = []

        groups = ExactStrategy().find_groups(paths, session, progress_callback=events.append)

        assert groups == []
        assert events == []
        assert session.files_to_hash == 0

    def test_progress_starts_at_zero_and_counts_up(self, test_files):
        paths = _paths(*test_files.values())
        events = []

        ExactStrategy().find_groups(paths, ScanSession(), progress_callback=events.append)

        assert events[0].hashed == 0
        assert events[0].current_file is None
        assert [e.hashed for e in events] == list(range(0, 7))
        assert all(e.total_files_found == len(paths) for e in events)
        assert all(e.total_to_hash == 6 for e in events)

    def test_content_mode_groups_text_duplicates(self, test_files):
        groups = ContentStrategy().find_groups(_paths(*test_files.values()), ScanSession())
        assert len(groups) == 2
        assert all(len(g.hash) == 32 for g in groups)

    def test_stats_record_every_stage(self, test_files):
        stats = ScanStats()
        ExactStrategy().find_groups(_paths(*test_files.values()), ScanSession(), stats=stats)

        assert list(stats.stage_stats) == ["group", "hash", "resolve"]
        assert stats.stage_stats["group"]["files"] == 6
        assert stats.stage_stats["resolve"]["groups"] == 2


class TestBuildStrategy:
    @pytest.mark.parametrize("mode, expected", [
        (ScanMode.EXACT, ExactStrategy),
        (ScanMode.CONTENT, ContentStrategy),
        (ScanMode.SIZE_ONLY, SizeOnlyStrategy),
        (ScanMode.FILENAME, FilenameStrategy),
        (ScanMode.DATE, DateStrategy),
    ])
    def test_strategy_per_mode(self, mode, expected):
        assert type(build_strategy(mode)) is expected

    def test_content_strategy_uses_content_resolver(self):
        assert isinstance(build_strategy(ScanMode.CONTENT).resolver, ContentResolver)

    def test_pool_size_is_passed_to_hasher(self):
        assert build_strategy(ScanMode.EXACT, pool_size=2).hasher.pool_size == 2
