"""Remote script execution over pooled SSH connections."""

import logging
from typing import TYPE_CHECKING

import asyncssh

from flotilla.errors import TransportError
from flotilla.models import CommandResult
from flotilla.services.connection import get_connection_with_retry

if TYPE_CHECKING:
    from flotilla.models import SSHHost
    from flotilla.protocols import SSHConnectionPool

logger = logging.getLogger(__name__)


def _decode(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


async def run_ssh_command(
    pool: "SSHConnectionPool",
    host: "SSHHost",
    script: str,
    timeout: int | None = None,
) -> CommandResult:
    """Run script on host with stderr merged into stdout.

    A nonzero exit status is not an error; it is returned in the result.

    Raises:
        TransportError: If the host cannot be reached or the run times out
    """
    conn = await get_connection_with_retry(pool, host)

    try:
        result = await conn.run(
            script,
            check=False,
            stderr=asyncssh.STDOUT,
            errors="replace",
            timeout=timeout,
        )
    except (asyncssh.Error, OSError, TimeoutError) as e:
        await pool.remove_connection(host.name)
        raise TransportError(host.name, e) from e

    # exit_status is None when the remote process was killed by a signal
    code = result.exit_status if result.exit_status is not None else -1
    logger.debug("Script on %s exited with %d", host.name, code)
    return CommandResult(output=_decode(result.stdout), code=code)


class SSHTransport:
    """Transport implementation backed by a ConnectionPool."""

    def __init__(self, pool: "SSHConnectionPool", timeout: int | None = None) -> None:
        self.pool = pool
        self.timeout = timeout

    async def run(self, host: "SSHHost", script: str) -> CommandResult:
        return await run_ssh_command(self.pool, host, script, timeout=self.timeout)
