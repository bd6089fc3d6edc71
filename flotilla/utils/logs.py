"""Logging setup for the flotilla package."""

import logging
import sys

from flotilla.config import Settings
from flotilla.utils.console import ColorfulFormatter

NOISY_LOGGERS = [
    "asyncssh",
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
]


def configure_logging(settings: Settings) -> None:
    """Send flotilla logs to stderr and quiet third-party loggers.

    Safe to call more than once; the handler is only added the first time.
    """
    use_colors = settings.log_colors and sys.stderr.isatty()

    flotilla_logger = logging.getLogger("flotilla")
    flotilla_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    if not flotilla_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        flotilla_logger.addHandler(handler)
        flotilla_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
