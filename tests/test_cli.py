"""
CLI tests — argument handling, output formats, exit codes and Ctrl+C mapping.
"""
import json
import signal

import pytest

from dupescan.cli import CLIApplication, EXIT_CANCELLED
from dupescan.commands import ScanCommand
from dupescan.core import ScanSession
from dupescan.core.models import ScanMode


class TestArgumentParsing:

    def test_defaults(self, temp_dir):
        args = CLIApplication.parse_args(["-i", str(temp_dir)])
        assert args.input == [str(temp_dir)]
        assert args.mode == "exact"
        assert args.workers is None
        assert not args.json and not args.quiet and not args.verbose

    def test_multiple_inputs(self, temp_dir):
        args = CLIApplication.parse_args(["--input", str(temp_dir), str(temp_dir / "x"), "--mode", "size-only"])
        assert len(args.input) == 2
        assert args.mode == "size-only"

    def test_unknown_mode_rejected_by_parser(self, temp_dir):
        with pytest.raises(SystemExit) as exc:
            CLIApplication.parse_args(["-i", str(temp_dir), "--mode", "fuzzy"])
        assert exc.value.code == 2

    def test_input_is_required(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args([])

    @pytest.mark.parametrize("alias, expected", [
        ("sizeOnly", ScanMode.SIZE_ONLY),
        ("size-only", ScanMode.SIZE_ONLY),
        ("name", ScanMode.FILENAME),
        ("content", ScanMode.CONTENT),
    ])
    def test_create_request_resolves_aliases(self, temp_dir, alias, expected):
        app = CLIApplication()
        args = app.parse_args(["-i", str(temp_dir), "--mode", alias])
        assert app.create_request(args).mode is expected


class TestValidation:

    def test_no_existing_directory_exits(self, temp_dir, capsys):
        app = CLIApplication()
        with pytest.raises(SystemExit) as exc:
            app.run(["-i", str(temp_dir / "missing")])
        assert exc.value.code == 1
        assert "❌ Error:" in capsys.readouterr().err

    def test_missing_root_is_only_a_warning(self, test_files, temp_dir, capsys):
        app = CLIApplication()
        app.run(["-i", str(temp_dir / "missing"), str(temp_dir), "--json"])

        captured = capsys.readouterr()
        assert "Directory not found" in captured.err
        assert json.loads(captured.out)["success"] is True

    def test_workers_must_be_positive(self, temp_dir):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-i", str(temp_dir), "--workers", "0"])
        assert exc.value.code == 1


class TestOutput:

    def test_json_output_matches_report_shape(self, test_files, temp_dir, capsys):
        CLIApplication().run(["-i", str(temp_dir), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["cancelled"] is False
        assert "error" not in data
        file_sets = {frozenset(g["files"]) for g in data["duplicates"]}
        assert frozenset(str(test_files[k]) for k in ("dup2_a", "dup2_b")) in file_sets
        assert all(set(g) == {"hash", "size", "files"} for g in data["duplicates"])

    def test_text_output_lists_groups(self, test_files, temp_dir, capsys):
        CLIApplication().run(["-i", str(temp_dir)])

        out = capsys.readouterr().out
        assert "Found 2 duplicate groups (5 files)" in out
        assert str(test_files["dup2_a"]) in out
        assert "Can free up: 4.00KB" in out

    def test_no_duplicates_message(self, temp_dir, capsys):
        (temp_dir / "only.txt").write_bytes(b"x")
        CLIApplication().run(["-i", str(temp_dir)])
        assert "No duplicate groups found." in capsys.readouterr().out

    def test_quiet_suppresses_results(self, test_files, temp_dir, capsys):
        CLIApplication().run(["-i", str(temp_dir), "--quiet"])
        assert capsys.readouterr().out == ""

    def test_verbose_shows_progress_and_stats(self, test_files, temp_dir, capsys):
        CLIApplication().run(["-i", str(temp_dir), "--verbose", "--workers", "2"])

        captured = capsys.readouterr()
        assert "[hashing] 6/6" in captured.err
        assert "Scan Statistics" in captured.out


class TestCancellation:

    def test_sigint_cancels_running_session(self):
        app = CLIApplication()
        app.quiet = True
        app.session = ScanSession()

        app._on_sigint(signal.SIGINT, None)

        assert app.session.is_cancelled()

    def test_second_sigint_interrupts(self):
        app = CLIApplication()
        app.quiet = True
        app.session = ScanSession()
        app.session.cancel()

        with pytest.raises(KeyboardInterrupt):
            app._on_sigint(signal.SIGINT, None)

    def test_cancelled_scan_exits_130_with_partial_results(self, test_files, temp_dir, capsys, monkeypatch):
        """A scan cancelled mid-way still prints its report, then exits with 130."""
        original_execute = ScanCommand.execute

        def execute_cancelled(self, request, session=None, progress_callback=None):
            session.cancel()
            return original_execute(self, request, session=session, progress_callback=progress_callback)

        monkeypatch.setattr("dupescan.commands.ScanCommand.execute", execute_cancelled)

        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-i", str(temp_dir), "--json"])

        assert exc.value.code == EXIT_CANCELLED
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["cancelled"] is True

    def test_sigint_handler_is_restored(self, temp_dir):
        before = signal.getsignal(signal.SIGINT)
        CLIApplication().run(["-i", str(temp_dir), "--quiet"])
        assert signal.getsignal(signal.SIGINT) is before
