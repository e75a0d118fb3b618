#!/usr/bin/env python3
"""
dupescan CLI — Command line interface for duplicate file detection.
Runs the same engine as the GUI worker and the background service, with
console progress and Ctrl+C cancellation.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import signal
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupescan.core.models import ScanMode, ScanProgress, ScanReport, ScanRequest
from dupescan.core.session import ScanSession
from dupescan.commands import ScanCommand
from dupescan.utils.convert_utils import ConvertUtils
from dupescan.services.duplicate_service import DuplicateService
from dupescan.aliases import (
    SCAN_MODE_ALIASES, SCAN_MODE_CHOICES, SCAN_MODE_HELP_TEXT,
    EPILOG_TEXT
)

EXIT_CANCELLED = 130


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.session: Optional[ScanSession] = None

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupescan",
            description="dupescan — find duplicate files across directory trees",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            required=True,
            nargs="+",
            type=str,
            metavar='DIR',
            help="One or more directories (space separated) to scan for duplicates"
        )

        parser.add_argument(
            "--mode",
            choices=SCAN_MODE_CHOICES,
            default="exact",
            type=str,
            metavar='MODE',
            help=SCAN_MODE_HELP_TEXT
        )

        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='N',
            help="Number of hashing threads. Default: 2 x CPU cores, between 4 and 16"
        )

        # Output options
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the completion report as JSON: {success, cancelled, duplicates: [{hash, size, files}]}"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show hashing progress and detailed statistics"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        existing = 0
        for root in args.input:
            root_path = Path(root).expanduser()
            if not root_path.exists():
                self.warning(f"Directory not found, skipping: {root}")
            elif not root_path.is_dir():
                self.warning(f"Path is not a directory, skipping: {root}")
            else:
                existing += 1

        if existing == 0:
            self.error_exit("None of the input paths is an existing directory")

        if args.workers is not None and args.workers < 1:
            self.error_exit("--workers must be at least 1")

        if args.mode not in SCAN_MODE_ALIASES:
            self.error_exit(
                f"Invalid scan mode: '{args.mode}'.\n"
                f"Valid options: {', '.join(SCAN_MODE_CHOICES)}"
            )

    def create_request(self, args: argparse.Namespace) -> ScanRequest:
        """Create ScanRequest from CLI arguments."""
        try:
            mode = SCAN_MODE_ALIASES.get(args.mode, ScanMode.EXACT)
            return ScanRequest.from_strings(args.input, mode=mode.value)
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, progress: ScanProgress) -> None:
        """CLI progress callback - shows hashing progress in console."""
        if not self.verbose:
            return

        total = progress.total_to_hash
        percent = (progress.hashed / total) * 100 if total else 0.0
        sys.stderr.write(
            f"\r  [hashing] {progress.hashed}/{total} ({percent:.1f}%) "
            f"of {progress.total_files_found} files found"
        )
        sys.stderr.flush()

    def _on_sigint(self, signum, frame) -> None:
        """First Ctrl+C cancels cooperatively; partial results are still printed."""
        if self.session is not None and not self.session.is_cancelled():
            self.session.cancel()
            if not self.quiet:
                sys.stderr.write("\n⚠️  Cancelling... (waiting for files being read)\n")
                sys.stderr.flush()
            return
        raise KeyboardInterrupt

    def run_scan(self, request: ScanRequest, workers: Optional[int] = None) -> ScanReport:
        """Execute the scan with Ctrl+C mapped to session cancellation."""
        command = ScanCommand(pool_size=workers)
        self.session = ScanSession(caller_id="cli")

        if self.verbose:
            print(f"Finding duplicates (mode: {request.mode.display_name})...")

        previous_handler = signal.getsignal(signal.SIGINT)
        try:
            signal.signal(signal.SIGINT, self._on_sigint)
        except ValueError:
            # Not in the main thread: keep the default handler
            previous_handler = None

        try:
            report = command.execute(
                request,
                session=self.session,
                progress_callback=self.progress_callback if self.verbose else None
            )
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

        if self.verbose:
            sys.stderr.write("\n")
            if report.stats is not None:
                print("\nScan Statistics:")
                print(report.stats.print_summary())

        return report

    def output_results(self, report: ScanReport) -> None:
        """Output duplicate groups as plain text in report order."""
        if self.quiet:
            return

        if report.cancelled:
            print("⚠️  Scan cancelled — results below are partial.")

        groups = report.duplicates
        if not groups:
            print("No duplicate groups found.")
            return

        total_files = DuplicateService.total_files(groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files)")

        for idx, group in enumerate(groups, 1):
            size_str = ConvertUtils.bytes_to_human(group.size)
            print(f"\n📁 Group {idx} | Key: {group.hash} | Size: {size_str} | Files: {len(group.files)}")
            for i, path in enumerate(group.files):
                marker = " (original)" if i == 0 else ""
                print(f"   {path}{marker}")

        reclaimable = DuplicateService.reclaimable_bytes(groups)
        if reclaimable:
            print(f"\nCan free up: {ConvertUtils.bytes_to_human(reclaimable)}")

    @staticmethod
    def output_json(report: ScanReport) -> None:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        request = self.create_request(args)

        if not self.quiet and not args.json:
            print(f"Scanning: {', '.join(request.root_paths)}")

        report = self.run_scan(request, workers=args.workers)

        if args.json:
            self.output_json(report)
        elif report.success:
            self.output_results(report)

        if not report.success:
            self.error_exit(f"Scan failed: {report.error}")

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")

        if report.cancelled:
            sys.exit(EXIT_CANCELLED)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(EXIT_CANCELLED)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
