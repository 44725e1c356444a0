"""Tests for configuration loading and overrides."""

import pytest

from mpdtrigger.config import DEFAULT_COMMAND, AppConfig
from mpdtrigger.config_loader import load_config

ENV_VARS = ("MPD_HOST", "MPD_PORT", "MPD_TRIGGER_COMMAND", "MPD_TRIGGER_SHELL", "DEBUG", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_file():
    config = load_config()
    assert config.mpd.host == "localhost"
    assert config.mpd.port == 6600
    assert config.mpd.reconnect_delay_seconds == 2.0
    assert config.trigger.command == DEFAULT_COMMAND
    assert config.trigger.shell == "bash"
    assert config.trigger.max_output_length == 2047
    assert config.log_level == "INFO"


def test_yaml_file(tmp_path):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text(
        "mpd:\n"
        "  host: music.lan\n"
        "  port: 6601\n"
        "trigger:\n"
        "  command: \"echo '{title}'\"\n"
        "  shell: sh\n"
        "  max_output_length: null\n"
        "log_level: debug\n"
    )

    config = load_config(str(config_file))

    assert config.mpd.host == "music.lan"
    assert config.mpd.port == 6601
    assert config.trigger.command == "echo '{title}'"
    assert config.trigger.shell == "sh"
    assert config.trigger.max_output_length is None
    assert config.log_level == "DEBUG"


def test_default_file_in_working_directory(tmp_path):
    (tmp_path / "mpd-trigger.yaml").write_text("mpd:\n  host: from-default-file\n")
    assert load_config().mpd.host == "from-default-file"


def test_malformed_yaml_falls_back_to_defaults(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("mpd: [unclosed\n")
    config = load_config(str(config_file))
    assert config.mpd.host == "localhost"


def test_non_mapping_yaml_falls_back_to_defaults(tmp_path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n")
    assert load_config(str(config_file)).trigger.shell == "bash"


def test_env_overrides(monkeypatch, tmp_path):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("mpd:\n  host: music.lan\n")
    monkeypatch.setenv("MPD_HOST", "env-host")
    monkeypatch.setenv("MPD_PORT", "7000")
    monkeypatch.setenv("MPD_TRIGGER_COMMAND", "echo {artist}")
    monkeypatch.setenv("MPD_TRIGGER_SHELL", "zsh")
    monkeypatch.setenv("DEBUG", "yes")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    config = load_config(str(config_file))

    assert config.mpd.host == "env-host"
    assert config.mpd.port == 7000
    assert config.trigger.command == "echo {artist}"
    assert config.trigger.shell == "zsh"
    assert config.debug is True
    assert config.log_level == "WARNING"


def test_invalid_port_env_ignored(monkeypatch):
    monkeypatch.setenv("MPD_PORT", "not-a-port")
    assert load_config().mpd.port == 6600


def test_testing_config():
    config = AppConfig.create_for_testing()
    assert config.trigger.dry_run
    assert config.mpd.reconnect_delay_seconds < 1
    assert config.log_level == "DEBUG"


def test_quoted_capacities_are_converted(tmp_path):
    """Test that capacities and timeouts given as YAML strings become numbers."""
    config_file = tmp_path / "quoted.yaml"
    config_file.write_text(
        'trigger:\n  max_output_length: "100"\n  max_expression_length: "20"\n  command_timeout: "2.5"\n'
    )

    config = load_config(str(config_file))

    assert config.trigger.max_output_length == 100
    assert config.trigger.max_expression_length == 20
    assert config.trigger.command_timeout == 2.5


def test_invalid_capacity_falls_back_to_defaults(tmp_path, caplog):
    """Test that a capacity that is not a number is reported and ignored."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text('trigger:\n  max_output_length: "lots"\n  shell: sh\n')

    with caplog.at_level("WARNING", logger="config"):
        config = load_config(str(config_file))

    assert config.trigger.max_output_length == 2047
    assert config.trigger.shell == "bash"
    assert "Could not load config" in caplog.text
