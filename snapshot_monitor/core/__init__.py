"""Core monitoring functionality."""

from .monitor import SnapshotMonitor, run_check
from .scanner import SnapshotScanner, SnapshotError, NoSnapshotsError, FutureSnapshotError
from .transport import SftpTransport, PipeChannel, TransportError
from .evaluator import classify, evaluate
from .models import Verdict, ProbeConfig, SnapshotEntry, CheckResult

__all__ = [
    "SnapshotMonitor", "run_check",
    "SnapshotScanner", "SnapshotError", "NoSnapshotsError", "FutureSnapshotError",
    "SftpTransport", "PipeChannel", "TransportError",
    "classify", "evaluate",
    "Verdict", "ProbeConfig", "SnapshotEntry", "CheckResult",
]
