"""Probe data models."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ProbeParser = Callable[[str, int], Any]


@dataclass(frozen=True)
class Probe:
    """A remote shell command plus the parser for its output."""

    name: str
    command: str
    parser: ProbeParser


@dataclass(frozen=True)
class ProbeFrame:
    """One probe's demultiplexed output.

    exit_code is None when the frame's trailing status could not be read.
    """

    name: str
    output: str
    exit_code: int | None
