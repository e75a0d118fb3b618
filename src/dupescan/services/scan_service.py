"""
Background scan runner with one tracked session per caller.

A caller (a window, a client connection, ...) is identified by any string.
Starting a new scan for a caller whose previous scan is still running cancels
the old scan and replaces it; the old scan still delivers its own terminal
report, flagged cancelled.
"""
import threading
from typing import Callable, Dict, List, Optional
import logging

from dupescan.commands import ScanCommand
from dupescan.core.interfaces import FileSystem
from dupescan.core.models import ScanProgress, ScanReport, ScanRequest
from dupescan.core.session import ScanSession

logger = logging.getLogger(__name__)

ProgressHandler = Callable[[ScanProgress], None]
DoneHandler = Callable[[ScanReport], None]


class ScanService:
    """
    Runs ScanCommand on background threads and routes its events to callbacks.
    Callbacks are invoked from the scan thread.
    """

    def __init__(self, fs: Optional[FileSystem] = None, pool_size: Optional[int] = None):
        self.fs = fs
        self.pool_size = pool_size
        self._sessions: Dict[str, ScanSession] = {}
        self._threads: Dict[str, threading.Thread] = {}
        self._lock = threading.Lock()

    def start_scan(
            self,
            caller_id: str,
            request: ScanRequest,
            on_progress: Optional[ProgressHandler] = None,
            on_done: Optional[DoneHandler] = None
    ) -> ScanSession:
        """
        Start a scan in the background and return its session handle.

        Args:
            caller_id: Identity the session is tracked under
            request: What to scan and how
            on_progress: Receives ScanProgress events
            on_done: Receives the terminal ScanReport exactly once

        Returns:
            The new ScanSession (use it to cancel or wait)
        """
        session = ScanSession(caller_id=caller_id)
        thread = threading.Thread(
            target=self._run,
            args=(session, request, on_progress, on_done),
            name=f"dupescan-scan-{session.session_id[:8]}",
            daemon=True,
        )

        with self._lock:
            previous = self._sessions.get(caller_id)
            if previous is not None and not previous.state.is_terminal:
                logger.info(f"Caller {caller_id} started a new scan; cancelling session {previous.session_id}")
                previous.cancel()
            self._sessions[caller_id] = session
            self._threads[session.session_id] = thread

        thread.start()
        return session

    def cancel_scan(self, caller_id: str) -> bool:
        """Fire-and-forget cancellation. Returns False if the caller has no tracked session."""
        with self._lock:
            session = self._sessions.get(caller_id)
        if session is None:
            return False
        session.cancel()
        return True

    def get_session(self, caller_id: str) -> Optional[ScanSession]:
        with self._lock:
            return self._sessions.get(caller_id)

    def active_sessions(self) -> List[ScanSession]:
        with self._lock:
            return [s for s in self._sessions.values() if not s.state.is_terminal]

    def wait_all(self, timeout: Optional[float] = None) -> None:
        """Join every scan thread started so far (mainly for shutdown and tests)."""
        with self._lock:
            threads = list(self._threads.values())
        for thread in threads:
            thread.join(timeout)

    def _run(
            self,
            session: ScanSession,
            request: ScanRequest,
            on_progress: Optional[ProgressHandler],
            on_done: Optional[DoneHandler]
    ) -> None:
        command = ScanCommand(fs=self.fs, pool_size=self.pool_size)

        def safe_progress_emit(progress: ScanProgress) -> None:
            try:
                on_progress(progress)
            except Exception:
                logger.exception("Error in progress handler")

        report = command.execute(
            request,
            session=session,
            progress_callback=safe_progress_emit if on_progress else None,
        )

        try:
            if on_done:
                on_done(report)
        except Exception:
            logger.exception("Error in completion handler")
        finally:
            # The report has been delivered: stop tracking this session
            with self._lock:
                if self._sessions.get(session.caller_id) is session:
                    del self._sessions[session.caller_id]
                self._threads.pop(session.session_id, None)
