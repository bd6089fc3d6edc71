"""Utilities for flotilla."""

from flotilla.utils.console import ColorfulFormatter
from flotilla.utils.logs import configure_logging
from flotilla.utils.ping import check_host_online, check_hosts_online

__all__ = [
    "ColorfulFormatter",
    "check_host_online",
    "check_hosts_online",
    "configure_logging",
]
