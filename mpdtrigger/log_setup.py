"""Console logging with per-subsystem DEBUG filtering."""

import datetime
import logging
import time
from typing import Optional, Set

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


class MillisecondFormatter(logging.Formatter):
    """Formatter that includes milliseconds in timestamps."""

    def formatTime(self, record, datefmt=None):
        """Override formatTime to include milliseconds."""
        if datefmt:
            return time.strftime(datefmt, self.converter(record.created))
        dt = datetime.datetime.fromtimestamp(record.created)
        return dt.strftime("%H:%M:%S.%f")[:-3]


class DebugLogFilter(logging.Filter):
    """Filter controlling debug message visibility by subsystem."""

    def __init__(self, subsystems: Optional[Set[str]] = None):
        """Initialize filter with allowed subsystems.

        Args:
            subsystems: Logger names to show debug messages for.
                       None shows all debug messages, an empty set shows none.
        """
        super().__init__()
        self.subsystems = subsystems

    def filter(self, record):
        """Filter log records based on subsystem and level."""
        if record.levelno != logging.DEBUG:
            return True

        if self.subsystems is None:
            return True

        if not self.subsystems:
            return False

        return record.name in self.subsystems


def configure_logging(log_level: str = "INFO", debug_subsystems: Optional[Set[str]] = None) -> logging.Handler:
    """
    Install a console handler on the root logger.

    Args:
        log_level: Root level name, e.g. "INFO" or "DEBUG"
        debug_subsystems: Passed to DebugLogFilter

    Returns:
        The installed handler
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(MillisecondFormatter(LOG_FORMAT))
    handler.addFilter(DebugLogFilter(debug_subsystems))

    for existing in list(root_logger.handlers):
        if getattr(existing, "_mpdtrigger_handler", False):
            root_logger.removeHandler(existing)
    handler._mpdtrigger_handler = True
    root_logger.addHandler(handler)
    return handler
