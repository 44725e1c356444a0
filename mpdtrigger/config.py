"""
Configuration management for mpd-trigger.
"""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_COMMAND = "notify-send '{title?{title}:Unknown title}: {state} ({elapsed_pct}%)' '{artist}\\n{album}'"


@dataclass
class MPDConfig:
    """Configuration for the MPD connection and idle loop."""

    host: str = "localhost"
    port: int = 6600
    password: Optional[str] = None

    # Timing configuration
    connect_timeout: float = 10.0
    reconnect_delay_seconds: float = 2.0
    thread_join_timeout: float = 1.0

    # Threading
    daemon_threads: bool = True


@dataclass
class TriggerConfig:
    """Configuration for rendering and running the command."""

    command: str = DEFAULT_COMMAND
    shell: str = "bash"
    command_timeout: Optional[float] = None
    dry_run: bool = False

    # Capacities; None disables the check
    max_output_length: Optional[int] = 2047
    max_expression_length: Optional[int] = None


@dataclass
class AppConfig:
    """Main application configuration container."""

    mpd: MPDConfig = field(default_factory=MPDConfig)
    trigger: TriggerConfig = field(default_factory=TriggerConfig)

    # Global settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def create_default(cls) -> "AppConfig":
        """Create a default configuration instance."""
        return cls()

    @classmethod
    def create_for_testing(cls) -> "AppConfig":
        """Create a configuration suitable for testing."""
        config = cls()
        config.mpd.reconnect_delay_seconds = 0.01
        config.mpd.thread_join_timeout = 0.1
        config.mpd.connect_timeout = 0.1
        config.trigger.dry_run = True
        config.debug = True
        config.log_level = "DEBUG"
        return config
