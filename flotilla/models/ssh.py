"""SSH-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import asyncssh


@dataclass
class SSHHost:
    """A server from the project configuration."""

    name: str
    hostname: str
    user: str = "root"
    port: int = 22
    identity_file: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def address(self) -> str:
        """user@hostname:port, for log messages."""
        return f"{self.user}@{self.hostname}:{self.port}"


@dataclass
class PooledConnection:
    """A pooled SSH connection with last-used timestamp."""

    connection: "asyncssh.SSHClientConnection"
    last_used: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        """Update last-used timestamp."""
        self.last_used = datetime.now()

    @property
    def is_stale(self) -> bool:
        """Check if connection was closed."""
        is_closed = self.connection.is_closed
        # asyncssh exposes is_closed() as a method
        if callable(is_closed):
            is_closed = is_closed()
        return bool(is_closed)
