"""Dependency container for flotilla.

Holds the objects that own process-wide resources so they can be created
once and passed explicitly to the API surface.
"""

from dataclasses import dataclass

from flotilla.config import Settings
from flotilla.protocols import Transport
from flotilla.services.pool import ConnectionPool
from flotilla.services.transport import SSHTransport


@dataclass
class Dependencies:
    """Settings, SSH pool and the transport built on it."""

    settings: Settings
    pool: ConnectionPool
    transport: Transport

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment settings."""
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies from explicit settings."""
        pool = ConnectionPool(
            idle_timeout=settings.idle_timeout,
            max_size=settings.max_pool_size,
            known_hosts=settings.known_hosts,
            strict_host_key_checking=settings.strict_host_key_checking,
        )
        transport = SSHTransport(pool, timeout=settings.command_timeout)
        return cls(settings=settings, pool=pool, transport=transport)

    async def cleanup(self) -> None:
        """Close all SSH connections."""
        await self.pool.close_all()
