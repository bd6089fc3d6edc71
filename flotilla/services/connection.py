"""SSH connection helper with one automatic retry."""

import logging
from typing import TYPE_CHECKING

from flotilla.errors import TransportError

if TYPE_CHECKING:
    import asyncssh

    from flotilla.models import SSHHost
    from flotilla.protocols import SSHConnectionPool

logger = logging.getLogger(__name__)


async def get_connection_with_retry(
    pool: "SSHConnectionPool",
    host: "SSHHost",
) -> "asyncssh.SSHClientConnection":
    """Get a pooled connection, retrying once after dropping the old one.

    Raises:
        TransportError: If the retry fails as well
    """
    try:
        return await pool.get_connection(host)
    except Exception as first_error:
        logger.warning(
            "Connection to %s failed: %s, retrying after cleanup",
            host.name,
            first_error,
        )
        try:
            await pool.remove_connection(host.name)
            conn = await pool.get_connection(host)
            logger.info("Retry connection to %s succeeded", host.name)
            return conn
        except Exception as retry_error:
            logger.error("Retry connection to %s failed: %s", host.name, retry_error)
            raise TransportError(host.name, retry_error) from retry_error
