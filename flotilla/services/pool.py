"""SSH connection pool shared by probes, sessions and hooks.

Locking:
- `_meta_lock` guards the `_connections` OrderedDict and the `_host_locks` dict
- a per-host lock serializes connect/close for one server, so a slow
  handshake with one server never blocks the others
- always take the per-host lock before the meta lock

Connections are kept in LRU order; when the pool is full the least recently
used connection is closed before a new one is opened.
"""

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import asyncssh

from flotilla.models import PooledConnection

if TYPE_CHECKING:
    from flotilla.models import SSHHost

logger = logging.getLogger(__name__)


class ConnectionPool:
    """asyncssh connections keyed by server name."""

    def __init__(
        self,
        idle_timeout: int = 60,
        max_size: int = 100,
        known_hosts: str | None = None,
        strict_host_key_checking: bool = True,
    ) -> None:
        """Initialize pool.

        Args:
            idle_timeout: Seconds before idle connections are closed
            max_size: Maximum number of open connections (must be > 0)
            known_hosts: Path to known_hosts file, or None to skip verification
            strict_host_key_checking: Reject hosts whose key is not known

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")

        self.idle_timeout = idle_timeout
        self.max_size = max_size
        self._connections: OrderedDict[str, PooledConnection] = OrderedDict()
        self._host_locks: dict[str, asyncio.Lock] = {}
        self._meta_lock = asyncio.Lock()
        self._cleanup_task: asyncio.Task[Any] | None = None
        self._known_hosts = known_hosts
        self._strict_host_key = strict_host_key_checking

        if known_hosts is None:
            logger.warning("SSH host key verification disabled (no known_hosts)")

        logger.debug(
            "ConnectionPool initialized (idle_timeout=%ds, max_size=%d)",
            idle_timeout,
            max_size,
        )

    async def _get_host_lock(self, host_name: str) -> asyncio.Lock:
        async with self._meta_lock:
            return self._host_locks.setdefault(host_name, asyncio.Lock())

    async def _evict_lru_if_needed(self) -> None:
        """Close least recently used connections until there is room for one."""
        evicted: list[PooledConnection] = []

        async with self._meta_lock:
            while len(self._connections) >= self.max_size:
                host_name, pooled = self._connections.popitem(last=False)
                logger.info(
                    "Pool full (%d/%d), evicting %s",
                    len(self._connections) + 1,
                    self.max_size,
                    host_name,
                )
                evicted.append(pooled)

        for pooled in evicted:
            pooled.connection.close()

    async def _connect(self, host: "SSHHost") -> asyncssh.SSHClientConnection:
        options: dict[str, Any] = {
            "port": host.port,
            "username": host.user,
            "known_hosts": self._known_hosts,
        }
        if host.identity_file:
            options["client_keys"] = [host.identity_file]
        if host.password:
            options["password"] = host.password

        try:
            return await asyncssh.connect(host.hostname, **options)
        except asyncssh.HostKeyNotVerifiable as e:
            if self._strict_host_key:
                logger.error("Host key verification failed for %s: %s", host.name, e)
                raise
            logger.warning(
                "Host key not verified for %s (strict checking off): %s",
                host.name,
                e,
            )
            options["known_hosts"] = None
            return await asyncssh.connect(host.hostname, **options)

    async def get_connection(self, host: "SSHHost") -> asyncssh.SSHClientConnection:
        """Return a live connection to host, opening one if needed."""
        host_lock = await self._get_host_lock(host.name)

        async with host_lock:
            pooled = self._connections.get(host.name)

            if pooled and not pooled.is_stale:
                pooled.touch()
                async with self._meta_lock:
                    self._connections.move_to_end(host.name)
                logger.debug("Reusing connection to %s", host.name)
                return pooled.connection

            if pooled:
                logger.info("Connection to %s is stale, reconnecting", host.name)

            await self._evict_lru_if_needed()

            logger.info("Opening SSH connection to %s (%s)", host.name, host.address)
            conn = await self._connect(host)

            async with self._meta_lock:
                self._connections[host.name] = PooledConnection(connection=conn)
                self._connections.move_to_end(host.name)

            logger.debug(
                "SSH connection established to %s (pool_size=%d/%d)",
                host.name,
                len(self._connections),
                self.max_size,
            )

            if self._cleanup_task is None or self._cleanup_task.done():
                self._cleanup_task = asyncio.create_task(self._cleanup_loop())

            return conn

    async def _cleanup_loop(self) -> None:
        """Periodically close idle connections until the pool is empty."""
        interval = max(self.idle_timeout // 2, 1)
        while True:
            await asyncio.sleep(interval)
            await self._cleanup_idle()
            if not self._connections:
                break

    async def _cleanup_idle(self) -> None:
        """Close connections idle longer than idle_timeout, or already closed."""
        async with self._meta_lock:
            host_names = list(self._connections)

        cutoff = datetime.now() - timedelta(seconds=self.idle_timeout)

        for host_name in host_names:
            host_lock = await self._get_host_lock(host_name)
            async with host_lock:
                pooled = self._connections.get(host_name)
                if pooled and (pooled.last_used < cutoff or pooled.is_stale):
                    logger.info("Closing idle connection to %s", host_name)
                    pooled.connection.close()
                    del self._connections[host_name]

    async def remove_connection(self, host_name: str) -> None:
        """Close and forget the connection to one server. Safe if absent."""
        host_lock = await self._get_host_lock(host_name)
        async with host_lock:
            pooled = self._connections.pop(host_name, None)
            if pooled is not None:
                logger.info("Removing connection to %s", host_name)
                pooled.connection.close()

    async def close_all(self) -> None:
        """Close every pooled connection and stop the cleanup task."""
        async with self._meta_lock:
            host_names = list(self._connections)

        if host_names:
            logger.info("Closing %d SSH connection(s)", len(host_names))
        for host_name in host_names:
            await self.remove_connection(host_name)

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()

    @property
    def pool_size(self) -> int:
        """Number of pooled connections."""
        return len(self._connections)

    @property
    def active_hosts(self) -> list[str]:
        """Names of servers with pooled connections."""
        return list(self._connections)
