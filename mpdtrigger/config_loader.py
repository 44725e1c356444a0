"""
Configuration loader for mpd-trigger.

Loads settings from a YAML file, then applies environment variable overrides.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from .config import AppConfig, MPDConfig, TriggerConfig

log = logging.getLogger("config")

DEFAULT_CONFIG_PATH = "mpd-trigger.yaml"


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. Defaults to "mpd-trigger.yaml"

    Returns:
        AppConfig instance with loaded settings
    """
    config = AppConfig.create_default()

    config_path = config_path or DEFAULT_CONFIG_PATH
    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
            if config_data:
                apply_config_data(config, config_data)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            log.warning("Could not load config from %s: %s", config_path, e)

    apply_env_overrides(config)
    return config


def _optional(convert, value):
    """Convert value unless it is None (YAML null disables a limit)."""
    return None if value is None else convert(value)


def apply_config_data(config: AppConfig, config_data: Dict[str, Any]) -> None:
    """Apply parsed YAML data onto config."""
    if not isinstance(config_data, dict):
        raise ValueError(f"expected a mapping at top level, got {type(config_data).__name__}")

    if "mpd" in config_data:
        mpd_data = config_data["mpd"] or {}
        config.mpd = MPDConfig(
            host=mpd_data.get("host", "localhost"),
            port=int(mpd_data.get("port", 6600)),
            password=mpd_data.get("password"),
            connect_timeout=float(mpd_data.get("connect_timeout", 10.0)),
            reconnect_delay_seconds=float(mpd_data.get("reconnect_delay_seconds", 2.0)),
        )

    if "trigger" in config_data:
        trigger_data = config_data["trigger"] or {}
        defaults = TriggerConfig()
        config.trigger = TriggerConfig(
            command=trigger_data.get("command", defaults.command),
            shell=trigger_data.get("shell", defaults.shell),
            command_timeout=_optional(float, trigger_data.get("command_timeout")),
            dry_run=bool(trigger_data.get("dry_run", False)),
            max_output_length=_optional(int, trigger_data.get("max_output_length", defaults.max_output_length)),
            max_expression_length=_optional(int, trigger_data.get("max_expression_length")),
        )

    config.debug = config_data.get("debug", False)
    config.log_level = str(config_data.get("log_level", "INFO")).upper()


def apply_env_overrides(config: AppConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if os.getenv("MPD_HOST"):
        config.mpd.host = os.getenv("MPD_HOST")

    if os.getenv("MPD_PORT"):
        try:
            config.mpd.port = int(os.getenv("MPD_PORT"))
        except ValueError:
            log.warning("Ignoring invalid MPD_PORT: %s", os.getenv("MPD_PORT"))

    if os.getenv("MPD_TRIGGER_COMMAND"):
        config.trigger.command = os.getenv("MPD_TRIGGER_COMMAND")

    if os.getenv("MPD_TRIGGER_SHELL"):
        config.trigger.shell = os.getenv("MPD_TRIGGER_SHELL")

    if os.getenv("DEBUG"):
        config.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes")

    if os.getenv("LOG_LEVEL"):
        config.log_level = os.getenv("LOG_LEVEL").upper()
