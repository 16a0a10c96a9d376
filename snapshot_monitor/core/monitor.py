"""Main snapshot monitoring class."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .evaluator import evaluate
from .models import CheckResult, ProbeConfig, Verdict
from .scanner import SnapshotError, SnapshotScanner
from .transport import SftpTransport
from ..config.config_manager import ConfigManager
from ..utils.formatters import format_duration


logger = logging.getLogger(__name__)


def _error_text(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class SnapshotMonitor:
    """Runs one snapshot freshness check against a remote repository."""

    def __init__(self, config: ProbeConfig,
                 transport_factory: Callable[[ProbeConfig], SftpTransport] = SftpTransport,
                 scanner_factory: Callable[[Any, Callable[[], datetime]], SnapshotScanner] = SnapshotScanner,
                 clock: Optional[Callable[[], datetime]] = None):
        """Initialize snapshot monitor.

        Args:
            config: Validated probe configuration.
            transport_factory: Builds the transport for the configured host.
            scanner_factory: Builds a scanner from an open session and the clock.
            clock: Returns the current timezone-aware time.
        """
        self.config = config
        self.transport_factory = transport_factory
        self.scanner_factory = scanner_factory
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger(__name__)

    def run(self) -> CheckResult:
        """Open the session, find the newest snapshot and classify its age.

        Every failure is turned into a result; nothing is raised.
        """
        transport = self.transport_factory(self.config)

        try:
            with transport.session() as session:
                scanner = self.scanner_factory(session, self.clock)
                try:
                    age = scanner.latest_snapshot_age(self.config.repository)
                except SnapshotError as e:
                    self.logger.warning(f"Repository {self.config.repository}: {e}")
                    return CheckResult(e.verdict, str(e))
        except Exception as e:
            if getattr(transport, 'timed_out', False):
                return CheckResult(Verdict.UNKNOWN, f"timed out after {format_duration(self.config.timeout)}")
            self.logger.error(f"Check of {self.config.host} failed: {e}")
            return CheckResult(Verdict.UNKNOWN, _error_text(e))

        result = evaluate(age, self.config.warning, self.config.critical)
        self.logger.info(f"Snapshot age {age} classified as {result.verdict.name}")
        return result


def run_check(options: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None,
              monitor_factory: Callable[[ProbeConfig], SnapshotMonitor] = SnapshotMonitor) -> CheckResult:
    """Validate configuration and run a single check.

    Args:
        options: Command-line option values.
        config_path: Optional path to a YAML configuration file.
        monitor_factory: Builds the monitor from the validated config.

    Returns:
        The check result; configuration errors yield UNKNOWN.
    """
    try:
        config = ConfigManager(config_path).load_config(options)
    except (ValueError, OSError) as e:
        logger.error(f"Invalid configuration: {e}")
        return CheckResult(Verdict.UNKNOWN, _error_text(e))

    return monitor_factory(config).run()
