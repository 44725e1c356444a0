"""Tests for console logging configuration."""

import logging
import re

import pytest

from mpdtrigger.log_setup import DebugLogFilter, MillisecondFormatter, configure_logging


def make_record(name, level):
    return logging.LogRecord(name, level, __file__, 1, "message", None, None)


@pytest.mark.parametrize(
    "subsystems,name,level,expected",
    [
        (None, "render", logging.DEBUG, True),
        (set(), "render", logging.DEBUG, False),
        (set(), "render", logging.INFO, True),
        ({"mpd"}, "render", logging.DEBUG, False),
        ({"mpd"}, "mpd", logging.DEBUG, True),
        ({"mpd"}, "render", logging.ERROR, True),
    ],
)
def test_debug_filter(subsystems, name, level, expected):
    assert DebugLogFilter(subsystems).filter(make_record(name, level)) is expected


def test_millisecond_formatter():
    formatted = MillisecondFormatter("%(asctime)s").format(make_record("render", logging.INFO))
    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3}", formatted)


def test_configure_logging_replaces_own_handler():
    root_logger = logging.getLogger()
    first = configure_logging("DEBUG")
    second = configure_logging("INFO", {"mpd"})
    try:
        assert first not in root_logger.handlers
        assert second in root_logger.handlers
        assert root_logger.level == logging.INFO
    finally:
        root_logger.removeHandler(second)
