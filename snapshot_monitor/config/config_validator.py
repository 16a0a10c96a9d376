"""Configuration validation for snapshot monitor."""

from datetime import timedelta
from typing import Any, Dict, Optional

from ..core.models import ProbeConfig
from ..utils.formatters import parse_duration


class ConfigValidator:
    """Validates snapshot monitor configuration."""

    REQUIRED_THRESHOLDS = ['warning', 'critical']
    REQUIRED_FIELDS = ['repository', 'host', 'user']

    def validate(self, config: Dict[str, Any]) -> ProbeConfig:
        """Validate configuration data and build the probe configuration.

        Args:
            config: Merged configuration dictionary.

        Returns:
            Immutable ProbeConfig.

        Raises:
            ValueError: If configuration is invalid. The message names the
                offending option.
        """
        thresholds = {name: self._validate_threshold(config, name)
                      for name in self.REQUIRED_THRESHOLDS}

        for field in self.REQUIRED_FIELDS:
            if not config.get(field):
                raise ValueError(f"The option '{field}' needs to be set.")

        port = config.get('port')
        if port is None or str(port) == '':
            raise ValueError("The option 'port' needs to be a valid port.")

        ssh_command = config.get('ssh_command')
        if not ssh_command:
            raise ValueError("The option 'ssh_command' needs to be set.")

        ssh_options = config.get('ssh_options') or []
        if isinstance(ssh_options, str) or not isinstance(ssh_options, (list, tuple)):
            raise ValueError("The option 'ssh_options' needs to be a list.")

        return ProbeConfig(
            warning=thresholds['warning'],
            critical=thresholds['critical'],
            repository=str(config['repository']),
            host=str(config['host']),
            user=str(config['user']),
            port=str(port),
            ssh_command=str(ssh_command),
            ssh_options=tuple(str(option) for option in ssh_options),
            timeout=self._validate_timeout(config.get('timeout'))
        )

    def _validate_threshold(self, config: Dict[str, Any], name: str) -> timedelta:
        """Parse a required, non-negative threshold duration.

        Raises:
            ValueError: If the threshold is missing, malformed or negative.
        """
        value = config.get(name)
        if value is None or value == '':
            raise ValueError(f"The option '{name}' needs to be set and greater than 0.")

        duration = self._parse(name, value)
        if duration < timedelta(0):
            raise ValueError(f"The option '{name}' needs to be set and greater than 0.")
        return duration

    def _validate_timeout(self, value: Any) -> Optional[timedelta]:
        if value is None or value == '':
            return None

        timeout = self._parse('timeout', value)
        if timeout <= timedelta(0):
            raise ValueError("The option 'timeout' needs to be greater than 0.")
        return timeout

    def _parse(self, name: str, value: Any) -> timedelta:
        try:
            return parse_duration(value)
        except ValueError:
            raise ValueError(f"The option '{name}' has an invalid duration: '{value}'.")
