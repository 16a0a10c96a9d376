"""
Snapshot Monitor - A freshness check for remote backup repositories.

This package connects to a restic repository over SFTP (tunnelled through the
system ssh client), finds the newest snapshot and reports its age as a
monitoring plugin result.
"""

__version__ = "1.0.0"

from .core.monitor import SnapshotMonitor, run_check
from .core.models import Verdict, CheckResult, ProbeConfig

__all__ = ["SnapshotMonitor", "run_check", "Verdict", "CheckResult", "ProbeConfig"]
