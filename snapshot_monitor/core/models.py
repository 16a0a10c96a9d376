"""Data models for snapshot monitoring."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Optional, Tuple


class Verdict(IntEnum):
    """Check state. The integer value is the plugin exit code."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class ProbeConfig:
    """Settings for a single snapshot freshness check."""
    warning: timedelta
    critical: timedelta
    repository: str
    host: str
    user: str
    port: str = "22"
    ssh_command: str = "ssh"
    ssh_options: Tuple[str, ...] = ()
    timeout: Optional[timedelta] = None


@dataclass
class SnapshotEntry:
    """A directory entry below the repository's snapshots directory."""
    name: str
    modified_time: datetime


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a check run."""
    verdict: Verdict
    message: str
