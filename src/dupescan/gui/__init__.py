"""Optional Qt integration (install with the [gui] extra)."""
from dupescan.gui.worker import ScanWorker, WorkerSignals

__all__ = ["ScanWorker", "WorkerSignals"]
