"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "yellow": "\033[33m",
    "green": "\033[32m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Longest prefix first
COMPONENT_COLORS = {
    "flotilla.services": COLORS["bright_magenta"],
    "flotilla.probes": COLORS["bright_blue"],
    "flotilla.dispatch": COLORS["bright_cyan"],
    "flotilla.plugins": COLORS["cyan"],
    "flotilla.config": COLORS["green"],
    "flotilla.server": COLORS["yellow"],
}
DEFAULT_COMPONENT_COLOR = COLORS["white"]

_SSH_ADDRESS = re.compile(r"(\w+@[\w.\-]+:\d+)")
_HOOK_NAME = re.compile(r"\b((?:pre|post)\.[\w.\-]+)")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with level colors and per-component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if name.startswith(prefix):
                return color
        return DEFAULT_COMPONENT_COLOR

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt.strftime('%H:%M:%S')}.{int(record.msecs):03d}"

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix("flotilla.")
        return self._colorize(f"{name:<18}", self._component_color(record.name))

    def _highlight_message(self, message: str) -> str:
        if not self.use_colors:
            return message
        message = _SSH_ADDRESS.sub(
            f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
        )
        return _HOOK_NAME.sub(f"{COLORS['bright_cyan']}\\1{COLORS['reset']}", message)

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._colorize(
            f"{record.levelname:<8}",
            LEVEL_COLORS.get(record.levelname, COLORS["white"]),
        )
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
