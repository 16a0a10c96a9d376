"""Snapshot directory scanning over an SFTP session."""

import logging
import posixpath
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from .models import SnapshotEntry, Verdict


class SnapshotError(Exception):
    """A repository condition that is reported as a check state."""

    verdict = Verdict.CRITICAL


class NoSnapshotsError(SnapshotError):
    """The snapshots directory is empty."""

    def __init__(self):
        super().__init__("no snapshots found")


class FutureSnapshotError(SnapshotError):
    """The newest snapshot is dated after the local clock."""

    def __init__(self):
        super().__init__("latest snapshot is in the future")


class SnapshotScanner:
    """Finds the newest snapshot of a repository.

    The session only needs a ``listdir_attr(path)`` method returning
    objects with ``filename`` and ``st_mtime`` attributes, which is what
    ``paramiko.SFTPClient`` provides.
    """

    SNAPSHOTS_DIR = "snapshots"

    def __init__(self, session, clock: Optional[Callable[[], datetime]] = None):
        """Initialize snapshot scanner.

        Args:
            session: Open SFTP session used for directory listings.
            clock: Returns the current timezone-aware time. It is read
                after the listing has completed.
        """
        self.session = session
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger(__name__)

    def list_snapshots(self, repository: str) -> List[SnapshotEntry]:
        """List the entries of the repository's snapshots directory.

        Args:
            repository: Path of the repository on the remote host.

        Returns:
            List of SnapshotEntry objects, in listing order.
        """
        path = posixpath.join(repository, self.SNAPSHOTS_DIR)
        self.logger.info(f"Listing {path}")

        entries = []
        for attrs in self.session.listdir_attr(path):
            if attrs.st_mtime is None:
                self.logger.debug(f"Skipping {attrs.filename}: no modification time")
                continue
            entries.append(SnapshotEntry(
                name=attrs.filename,
                modified_time=datetime.fromtimestamp(attrs.st_mtime, timezone.utc)
            ))

        self.logger.info(f"Found {len(entries)} snapshots in {path}")
        return entries

    def latest_snapshot_age(self, repository: str, now: Optional[datetime] = None) -> timedelta:
        """Compute the age of the newest snapshot.

        When several snapshots share the newest modification time the first
        one in listing order is picked; the age is the same either way.

        Args:
            repository: Path of the repository on the remote host.
            now: Current time, timezone-aware. Defaults to the scanner's
                clock, read once the listing has returned.

        Returns:
            Non-negative age of the newest snapshot.

        Raises:
            NoSnapshotsError: If the snapshots directory is empty.
            FutureSnapshotError: If the newest snapshot is dated after ``now``.
        """
        entries = self.list_snapshots(repository)
        if not entries:
            raise NoSnapshotsError()

        if now is None:
            now = self.clock()
        latest = max(entries, key=lambda entry: entry.modified_time)
        age = now - latest.modified_time
        self.logger.debug(f"Latest snapshot {latest.name} modified {latest.modified_time.isoformat()}")

        # Sanity check against clock skew
        if age < timedelta(0):
            raise FutureSnapshotError()

        return age
