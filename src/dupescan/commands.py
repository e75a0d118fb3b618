"""
Unified command orchestrator for scans.
This is the SINGLE source of truth for the pipeline — used by the CLI, the
background scan service and the GUI worker.
No Qt/PySide6 dependencies — pure Python.
"""
import time
from typing import List, Optional
import logging

from dupescan.core.filesystem import LocalFileSystem
from dupescan.core.interfaces import FileSystem, ProgressCallback
from dupescan.core.models import ScanMode, ScanReport, ScanRequest, ScanStats, Stage
from dupescan.core.session import ScanSession
from dupescan.core.stages import build_strategy
from dupescan.core.walker import DirectoryWalkerImpl

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Runs the whole pipeline for one request:
    1. Walk the roots into a flat file list
    2. Let the mode strategy bucket, hash and resolve
    3. Produce exactly one terminal ScanReport and record it on the session

    Usage:
        session = ScanSession()
        report = ScanCommand().execute(
            ScanRequest(["/data/photos"], ScanMode.EXACT),
            session=session,
            progress_callback=lambda p: print(p.hashed, p.total_to_hash),
        )

    Another thread may call session.cancel() at any time; the report then has
    cancelled=True and holds the groups resolved from already-hashed files.
    """

    def __init__(self, fs: Optional[FileSystem] = None, pool_size: Optional[int] = None):
        self.fs = fs or LocalFileSystem()
        self.pool_size = pool_size
        self._files: List[str] = []

    def execute(
            self,
            request: ScanRequest,
            session: Optional[ScanSession] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> ScanReport:
        """
        Execute a scan.

        Args:
            request: Validated scan request
            session: Session to drive; a fresh one is created when omitted
            progress_callback: Receives ScanProgress events (hash modes only)

        Returns:
            The terminal ScanReport. Unexpected failures are reported with
            success=False instead of being raised.

        Raises:
            SessionStateError: If the session was already started
        """
        session = session or ScanSession()
        session.start()

        stats = ScanStats()
        total_start_time = time.time()
        logger.debug(f"Session {session.session_id}: scanning {request.root_paths} "
                     f"(mode: {request.mode.value})")

        try:
            start_time = time.time()
            walker = DirectoryWalkerImpl(self.fs)
            self._files = walker.walk(request.root_paths)
            session.files_found = len(self._files)
            stats.update_stage(Stage.WALK.value, 0, len(self._files), time.time() - start_time)

            strategy = build_strategy(request.mode, fs=self.fs, pool_size=self.pool_size)
            groups = strategy.find_groups(
                self._files,
                session,
                progress_callback=progress_callback,
                stats=stats,
            )
            report = ScanReport(
                success=True,
                cancelled=session.is_cancelled(),
                duplicates=groups,
                stats=stats,
            )
        except Exception as e:
            logger.exception(f"Scan {session.session_id} failed")
            report = ScanReport.failed(str(e) or type(e).__name__, stats=stats)

        stats.total_time = time.time() - total_start_time
        session.finish(report)
        logger.debug(f"Session {session.session_id} finished: {session.state.value}, "
                     f"{len(report.duplicates)} groups")
        return report

    def get_files(self) -> List[str]:
        """Walked files of the last execution."""
        return self._files.copy()  # Return copy to prevent external mutation


def scan_directories(root_paths: List[str], fs: Optional[FileSystem] = None) -> ScanReport:
    """
    Blocking exact-mode scan without progress reporting or cancellation.
    """
    return ScanCommand(fs=fs).execute(ScanRequest(root_paths=root_paths, mode=ScanMode.EXACT))
