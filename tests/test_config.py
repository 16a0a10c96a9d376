from datetime import timedelta

import pytest

from snapshot_monitor.config.config_manager import ConfigManager
from snapshot_monitor.config.config_validator import ConfigValidator


VALID = {
    'warning': '24h',
    'critical': '48h',
    'repository': '/srv/restic/repo',
    'host': 'backup.example.org',
    'user': 'restic',
    'port': '22',
    'ssh_command': 'ssh',
    'ssh_options': [],
}


def with_(**changes):
    config = dict(VALID)
    config.update(changes)
    return config


def test_valid_config_builds_probe_config():
    config = ConfigValidator().validate(VALID)
    assert config.warning == timedelta(hours=24)
    assert config.critical == timedelta(hours=48)
    assert config.repository == '/srv/restic/repo'
    assert config.port == '22'
    assert config.ssh_options == ()
    assert config.timeout is None


@pytest.mark.parametrize("option", ['warning', 'critical'])
@pytest.mark.parametrize("value", [None, '', '-1h'])
def test_thresholds_must_be_set_and_non_negative(option, value):
    with pytest.raises(ValueError) as excinfo:
        ConfigValidator().validate(with_(**{option: value}))
    assert str(excinfo.value) == f"The option '{option}' needs to be set and greater than 0."


def test_zero_threshold_is_allowed():
    assert ConfigValidator().validate(with_(warning='0')).warning == timedelta(0)


def test_invalid_duration_names_option():
    with pytest.raises(ValueError) as excinfo:
        ConfigValidator().validate(with_(critical='two days'))
    assert str(excinfo.value) == "The option 'critical' has an invalid duration: 'two days'."


def test_warning_is_checked_first():
    with pytest.raises(ValueError, match="'warning'"):
        ConfigValidator().validate(with_(warning=None, critical=None, host=None))


@pytest.mark.parametrize("option", ['repository', 'host', 'user'])
def test_required_strings(option):
    with pytest.raises(ValueError) as excinfo:
        ConfigValidator().validate(with_(**{option: ''}))
    assert str(excinfo.value) == f"The option '{option}' needs to be set."


def test_empty_port_is_rejected():
    with pytest.raises(ValueError) as excinfo:
        ConfigValidator().validate(with_(port=''))
    assert str(excinfo.value) == "The option 'port' needs to be a valid port."


def test_numeric_port_is_kept_as_string():
    assert ConfigValidator().validate(with_(port=2222)).port == '2222'


def test_timeout():
    assert ConfigValidator().validate(with_(timeout='2m')).timeout == timedelta(minutes=2)
    with pytest.raises(ValueError, match="'timeout' needs to be greater than 0"):
        ConfigValidator().validate(with_(timeout='0'))


def test_ssh_options_must_be_list():
    with pytest.raises(ValueError, match="'ssh_options'"):
        ConfigValidator().validate(with_(ssh_options='-o BatchMode=yes'))


def test_manager_without_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(ConfigManager, 'DEFAULT_CONFIG_LOCATIONS', [str(tmp_path / 'none.yaml')])
    config = ConfigManager().load_config({
        'warning': '1h', 'critical': '2h', 'repository': '/r', 'host': 'h', 'user': 'u',
        'port': None, 'ssh_options': [],
    })
    assert config.port == '22'
    assert config.ssh_command == 'ssh'
    assert config.ssh_options == ()


def test_manager_merges_file_and_overrides(tmp_path):
    config_file = tmp_path / 'config.yaml'
    config_file.write_text(
        "warning: 24h\n"
        "critical: 172800\n"
        "repository: /srv/restic/repo\n"
        "host: backup.example.org\n"
        "user: restic\n"
        "port: 2222\n"
        "ssh_options: ['-o', 'BatchMode=yes']\n",
        encoding='utf-8'
    )

    config = ConfigManager(str(config_file)).load_config({'host': 'other.example.org', 'user': None})

    assert config.host == 'other.example.org'
    assert config.user == 'restic'
    assert config.port == '2222'
    assert config.critical == timedelta(hours=48)
    assert config.ssh_options == ('-o', 'BatchMode=yes')


def test_manager_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / 'missing.yaml')).load_config({})


def test_manager_invalid_yaml(tmp_path):
    config_file = tmp_path / 'config.yaml'
    config_file.write_text("warning: [24h\n", encoding='utf-8')
    with pytest.raises(ValueError, match="Invalid YAML"):
        ConfigManager(str(config_file)).load_config({})


def test_manager_requires_mapping(tmp_path):
    config_file = tmp_path / 'config.yaml'
    config_file.write_text("- 24h\n", encoding='utf-8')
    with pytest.raises(ValueError, match="must contain a mapping"):
        ConfigManager(str(config_file)).load_config({})


@pytest.mark.parametrize("value", ['99999999999h', float('inf')])
def test_out_of_range_duration_names_option(value):
    with pytest.raises(ValueError) as excinfo:
        ConfigValidator().validate(with_(warning=value))
    assert str(excinfo.value) == f"The option 'warning' has an invalid duration: '{value}'."


def test_manager_infinite_yaml_duration(tmp_path):
    config_file = tmp_path / 'config.yaml'
    config_file.write_text(
        "warning: .inf\ncritical: 48h\nrepository: /r\nhost: h\nuser: u\n",
        encoding='utf-8'
    )
    with pytest.raises(ValueError, match="The option 'warning' has an invalid duration"):
        ConfigManager(str(config_file)).load_config({})
