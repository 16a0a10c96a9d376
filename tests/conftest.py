import logging
from datetime import datetime, timedelta, timezone

import pytest

from snapshot_monitor.core.models import ProbeConfig


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeAttrs:
    def __init__(self, filename, st_mtime):
        self.filename = filename
        self.st_mtime = st_mtime


class FakeSession:
    """Stands in for paramiko.SFTPClient."""

    def __init__(self, entries=None, error=None):
        self.entries = entries or []
        self.error = error
        self.listed = []
        self.close_count = 0

    def listdir_attr(self, path):
        self.listed.append(path)
        if self.error:
            raise self.error
        return list(self.entries)

    def close(self):
        self.close_count += 1


def snapshot_at(age, name="snap"):
    return FakeAttrs(name, int((NOW - age).timestamp()))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def probe_config():
    return ProbeConfig(
        warning=timedelta(hours=24),
        critical=timedelta(hours=48),
        repository="/srv/restic/repo",
        host="backup.example.org",
        user="restic",
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
