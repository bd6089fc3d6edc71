"""Tests for the console log formatter and logging setup."""

import logging
import sys

import pytest

from flotilla.config import Settings
from flotilla.utils.console import COLORS, ColorfulFormatter
from flotilla.utils.logs import configure_logging


def make_record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_plain_format() -> None:
    formatter = ColorfulFormatter(use_colors=False)

    line = formatter.format(make_record("flotilla.probes.fleet", "Probing 3 server(s)"))

    assert "\033[" not in line
    assert "INFO" in line
    assert "probes.fleet" in line
    assert "flotilla.probes" not in line
    assert line.endswith("Probing 3 server(s)")


def test_highlights_addresses_and_hooks() -> None:
    formatter = ColorfulFormatter(use_colors=True)

    line = formatter.format(
        make_record("flotilla.dispatch.engine", "Running hook pre.app.deploy on deploy@10.0.0.1:22")
    )

    assert f"{COLORS['bright_cyan']}pre.app.deploy{COLORS['reset']}" in line
    assert f"{COLORS['bright_magenta']}deploy@10.0.0.1:22{COLORS['reset']}" in line


def test_exception_is_appended() -> None:
    formatter = ColorfulFormatter(use_colors=False)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "flotilla.api", logging.ERROR, __file__, 1, "failed", None, True
        )
        record.exc_info = sys.exc_info()

    assert "RuntimeError: boom" in formatter.format(record)


@pytest.fixture
def flotilla_logger():
    logger = logging.getLogger("flotilla")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def test_configure_logging_once(flotilla_logger) -> None:
    settings = Settings(log_level="DEBUG", log_colors=False)

    configure_logging(settings)
    configure_logging(settings)

    assert flotilla_logger.level == logging.DEBUG
    assert len(flotilla_logger.handlers) == 1
    assert flotilla_logger.propagate is False
    assert logging.getLogger("asyncssh").level == logging.WARNING
