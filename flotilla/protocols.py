"""Protocol interfaces for dependency inversion.

The probe and dispatch code depends on these interfaces rather than on the
asyncssh-backed implementations, so tests can pass plain stub objects.

Usage Example:

    from flotilla.protocols import Transport

    class RecordingTransport:
        def __init__(self):
            self.scripts = []

        async def run(self, host, script):
            self.scripts.append((host.name, script))
            return CommandResult(output="", code=0)

    await probe_host(RecordingTransport(), host, registry)
"""

from typing import Any, Protocol, runtime_checkable

from flotilla.models import CommandResult, SSHHost


@runtime_checkable
class Transport(Protocol):
    """Runs one shell script on one host.

    Implementations return the combined stdout/stderr and exit status and
    raise on transport-level failures (connection refused, auth failure).
    """

    async def run(self, host: SSHHost, script: str) -> CommandResult:
        """Execute script on host.

        Args:
            host: Target server
            script: Shell script text

        Returns:
            Combined output and exit status

        Raises:
            TransportError: If the script could not be run at all
        """
        ...


@runtime_checkable
class SSHConnectionPool(Protocol):
    """Protocol for SSH connection pooling."""

    async def get_connection(self, host: SSHHost) -> Any:
        """Get or create connection for host."""
        ...

    async def remove_connection(self, host_name: str) -> None:
        """Remove connection from pool. Safe if absent."""
        ...

    async def close_all(self) -> None:
        """Close all connections in pool."""
        ...
