"""Per-server sessions, resolved by plugin.

Each plugin section of the project config lists the servers it runs on:

    {"servers": {"one": {...}, "two": {...}},
     "app": {"servers": {"one": {}}},
     "mongo": {"servers": {"two": {}}}}

The full session map (one per entry under "servers") is built on first use
and reused afterwards; pick() returns the part of it a set of plugins needs.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from flotilla.config import servers_from_config
from flotilla.models import CommandResult, SSHHost
from flotilla.protocols import Transport

logger = logging.getLogger(__name__)


class HostSession:
    """Runs scripts on one server through the shared transport."""

    def __init__(self, host: SSHHost, transport: Transport) -> None:
        self.host = host
        self.transport = transport

    @property
    def name(self) -> str:
        return self.host.name

    async def run(self, script: str) -> CommandResult:
        return await self.transport.run(self.host, script)

    def __repr__(self) -> str:
        return f"HostSession({self.host.name!r}, {self.host.address!r})"


SessionFactory = Callable[[SSHHost], Any]


class SessionResolver:
    """Lazily built, plugin-filtered view of per-server sessions."""

    def __init__(
        self,
        config_provider: Callable[[], dict[str, Any]],
        session_factory: SessionFactory,
    ) -> None:
        """Initialize resolver.

        Args:
            config_provider: Returns the current project config
            session_factory: Builds the session object for one server
        """
        self._config_provider = config_provider
        self._session_factory = session_factory
        self._sessions: dict[str, Any] | None = None

    @property
    def loaded(self) -> bool:
        return self._sessions is not None

    def load(self) -> dict[str, Any]:
        """Return the session map, building it on first call."""
        if self._sessions is None:
            servers = servers_from_config(self._config_provider())
            self._sessions = {
                name: self._session_factory(host) for name, host in servers.items()
            }
            logger.debug("Created %d session(s)", len(self._sessions))
        return self._sessions

    def pick(self, plugin_names: Iterable[str]) -> dict[str, Any]:
        """Sessions for the servers used by the named plugins.

        Plugins without a config section or without "servers" in it
        contribute nothing. Servers a plugin lists but "servers" does not
        define are skipped with a warning.
        """
        sessions = self.load()
        config = self._config_provider()
        picked: dict[str, Any] = {}

        for plugin_name in plugin_names:
            section = config.get(plugin_name)
            if not isinstance(section, dict) or not section.get("servers"):
                continue
            for server_name in section["servers"]:
                session = sessions.get(server_name)
                if session is None:
                    logger.warning(
                        "Plugin %s uses undefined server %s",
                        plugin_name,
                        server_name,
                    )
                    continue
                picked[server_name] = session

        return picked

    def reset(self) -> None:
        """Drop built sessions; the next call rebuilds them."""
        self._sessions = None
