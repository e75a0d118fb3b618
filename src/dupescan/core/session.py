"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/session.py
Per-scan state: identity, cancellation token, counters and lifecycle.

States:
    IDLE → SCANNING → COMPLETED | CANCELLED | FAILED

The cancellation flag is write-once: once set it is never cleared.
Counters are written only by the thread running the scan; other threads
may read them at any time.
"""

import threading
import uuid
from typing import Optional
import logging

from dupescan.core.errors import SessionStateError
from dupescan.core.models import SessionState, ScanReport

logger = logging.getLogger(__name__)


class ScanSession:
    """
    Handle for one scan request. Returned to the caller so it can cancel,
    wait for the terminal report or inspect progress counters.
    """

    def __init__(self, caller_id: Optional[str] = None, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.caller_id = caller_id
        self._cancel_event = threading.Event()
        self._done_event = threading.Event()
        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._report: Optional[ScanReport] = None

        self.files_found = 0
        self.files_to_hash = 0
        self.files_hashed = 0

    # --- cancellation ---

    def cancel(self) -> None:
        """Request cooperative cancellation. Fire-and-forget, idempotent."""
        if not self._cancel_event.is_set():
            logger.debug(f"Cancellation requested for session {self.session_id}")
        self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    # --- lifecycle ---

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.SCANNING

    @property
    def report(self) -> Optional[ScanReport]:
        return self._report

    def start(self) -> None:
        with self._lock:
            if self._state != SessionState.IDLE:
                raise SessionStateError(
                    f"Session {self.session_id} cannot start from state '{self._state.value}'"
                )
            self._state = SessionState.SCANNING

    def finish(self, report: ScanReport) -> None:
        """Record the terminal report and move to the matching terminal state."""
        with self._lock:
            if self._state != SessionState.SCANNING:
                raise SessionStateError(
                    f"Session {self.session_id} cannot finish from state '{self._state.value}'"
                )
            if not report.success:
                self._state = SessionState.FAILED
            elif report.cancelled:
                self._state = SessionState.CANCELLED
            else:
                self._state = SessionState.COMPLETED
            self._report = report
        self._done_event.set()

    def wait(self, timeout: Optional[float] = None) -> Optional[ScanReport]:
        """Block until the terminal report is available (or timeout). Returns the report or None."""
        if self._done_event.wait(timeout):
            return self._report
        return None

    # --- counters ---

    def record_hashed(self) -> int:
        """Count one attempted file (hashed or skipped). Returns the new total."""
        self.files_hashed += 1
        return self.files_hashed

    def __repr__(self):
        return (f"<ScanSession id={self.session_id} state={self.state.value} "
                f"hashed={self.files_hashed}/{self.files_to_hash}>")
