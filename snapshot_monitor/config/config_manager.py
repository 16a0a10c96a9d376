"""Configuration management for the snapshot monitor."""

import os
import logging
import yaml
from typing import Dict, Any, Optional
from .config_validator import ConfigValidator
from ..core.models import ProbeConfig


class ConfigManager:
    """Merges the optional configuration file with command-line options."""

    DEFAULT_CONFIG_LOCATIONS = [
        "snapshot-monitor.yaml",
        "snapshot-monitor.yml",
        os.path.expanduser("~/.snapshot-monitor/config.yaml"),
        os.path.expanduser("~/.snapshot-monitor/config.yml"),
        "/etc/snapshot-monitor/config.yaml",
        "/etc/snapshot-monitor/config.yml"
    ]

    DEFAULTS = {
        'port': '22',
        'ssh_command': 'ssh',
        'ssh_options': [],
        'timeout': None
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config file. If not provided,
                        the default locations are searched and a missing
                        file simply means no file settings.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()
        self.logger = logging.getLogger(__name__)

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> ProbeConfig:
        """Load, merge and validate configuration.

        Args:
            overrides: Command-line values. ``None`` values and empty
                sequences are treated as not given.

        Returns:
            Validated ProbeConfig.

        Raises:
            FileNotFoundError: If an explicit config file cannot be found.
            ValueError: If the config file or the merged options are invalid.
        """
        self.config_data = dict(self.DEFAULTS)
        self.config_data.update(self._read_config_file())

        for key, value in (overrides or {}).items():
            if value is None or (isinstance(value, (list, tuple)) and not value):
                continue
            self.config_data[key] = value

        return self.validator.validate(self.config_data)

    def _read_config_file(self) -> Dict[str, Any]:
        """Read settings from the configuration file, if there is one."""
        config_file = self._find_config_file()
        if config_file is None:
            return {}

        self.logger.info(f"Loading configuration from {config_file}")
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file {config_file}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        return data

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in default locations.

        Returns:
            Path to configuration file, or None if there is none.

        Raises:
            FileNotFoundError: If an explicitly given file does not exist.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location

        return None
