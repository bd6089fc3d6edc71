"""SSH services for flotilla."""

from flotilla.services.connection import get_connection_with_retry
from flotilla.services.pool import ConnectionPool
from flotilla.services.transport import SSHTransport, run_ssh_command

__all__ = [
    "ConnectionPool",
    "SSHTransport",
    "get_connection_with_retry",
    "run_ssh_command",
]
