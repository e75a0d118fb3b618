"""
Qt worker runnable — follows modern Qt pattern: QRunnable + QThreadPool.
Accepts a ScanRequest and drives a ScanSession, so stop() is the same
cooperative cancellation the CLI and the scan service use.
"""
from typing import Optional

from PySide6.QtCore import QRunnable, QObject, Signal, QMutex, QMutexLocker

from dupescan.commands import ScanCommand
from dupescan.core.interfaces import FileSystem
from dupescan.core.models import ScanProgress, ScanRequest
from dupescan.core.session import ScanSession


class WorkerSignals(QObject):
    """Separate QObject to hold signals (QRunnable cannot emit signals directly)."""
    progress = Signal(object)  # ScanProgress
    finished = Signal(object)  # ScanReport
    error = Signal(str)


class ScanWorker(QRunnable):
    """
    Worker runnable that performs a scan in the thread pool.
    Automatically deleted after execution (setAutoDelete=True).
    A stopped worker still emits finished() with the partial, cancelled report.
    """
    def __init__(self, request: ScanRequest, fs: Optional[FileSystem] = None, pool_size: Optional[int] = None):
        super().__init__()
        self.request = request
        self.command = ScanCommand(fs=fs, pool_size=pool_size)
        self.session = ScanSession(caller_id="gui")
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self.setAutoDelete(True)  # Critical: auto-delete after run() completes

    def stop(self):
        """Requests cooperative cancellation of the running scan."""
        self.session.cancel()

    def is_stopped(self) -> bool:
        return self.session.is_cancelled()

    def safe_progress_emit(self, progress: ScanProgress):
        """Emits progress signal safely with mutex protection."""
        with QMutexLocker(self._mutex):
            if not self.is_stopped():
                try:
                    self.signals.progress.emit(progress)
                except RuntimeError:
                    # Receiver already destroyed
                    pass

    def run(self):
        """Main execution method. Runs in thread pool thread."""
        try:
            report = self.command.execute(
                self.request,
                session=self.session,
                progress_callback=self.safe_progress_emit
            )
        except Exception as e:
            self.signals.error.emit(f"{type(e).__name__}: {str(e)}")
            return

        if report.success:
            self.signals.finished.emit(report)
        else:
            self.signals.error.emit(report.error or "Scan failed")
