"""Reusable probe output parsers.

Every parser takes the probe's trimmed output and exit code and returns a
value, or None when no value could be determined. None is an ordinary
outcome (tool not installed, node not in a swarm, ...), not an error.
"""

import json
from collections.abc import Callable
from typing import Any

DOCKER_ERROR_MARKER = "Error response"


def parse_json(output: str, code: int) -> Any:
    """Parse output as a single JSON value."""
    if code != 0:
        return None
    try:
        return json.loads(output.strip())
    except ValueError:
        return None


def parse_json_lines(output: str, code: int) -> list[Any] | None:
    """Parse one-JSON-value-per-line output into a list.

    Lines are joined with commas and wrapped in brackets. Empty output
    parses to an empty list.
    """
    if code != 0:
        return None
    joined = ",".join(output.split("\n"))
    try:
        result = json.loads(f"[{joined}]")
    except ValueError:
        return None
    if not isinstance(result, list):
        return [result]
    return result


def make_text_parser(
    error_marker: str | None = DOCKER_ERROR_MARKER,
) -> Callable[[str, int], str | None]:
    """Build a parser returning the trimmed output as a string.

    Args:
        error_marker: Output containing this text is treated as a failure
            even with exit code 0. None disables the check.
    """

    def parse_text(output: str, code: int) -> str | None:
        if code != 0:
            return None
        if error_marker and error_marker in output:
            return None
        return output.strip()

    return parse_text


parse_text = make_text_parser()
