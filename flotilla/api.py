"""The API object handed to command handlers and hooks.

One PluginAPI is created per invocation of the tool. It owns the project
config, the session map and the dispatcher, and gives plugins a single
entry point to the rest of the system.
"""

import asyncio
import logging
import os
import shlex
from collections.abc import Iterable
from typing import Any

from flotilla.config import CONFIG_FILENAME, load_project_config, servers_from_config
from flotilla.dependencies import Dependencies
from flotilla.dispatch import CommandRegistry, Dispatcher, HostSession, SessionResolver
from flotilla.errors import ConfigError
from flotilla.models import CommandResult, SSHHost
from flotilla.probes import FleetResult, ProbeRegistry, default_registry, get_server_info

logger = logging.getLogger(__name__)


class PluginAPI:
    """Entry point for plugins: config, sessions, commands and probing."""

    def __init__(
        self,
        base: str,
        args: Iterable[str] | None = None,
        options: dict[str, Any] | None = None,
        deps: Dependencies | None = None,
        registry: CommandRegistry | None = None,
        probes: ProbeRegistry | None = None,
    ) -> None:
        """Initialize the API.

        Args:
            base: Project directory
            args: Arguments left over after option parsing, for plugins
            options: Parsed command line options ("config", "verbose", ...)
            deps: Settings, SSH pool and transport (created on first use)
            registry: Commands and hooks to dispatch to
            probes: Probes run by get_server_info
        """
        self.options = options or {}
        self.args = list(args or [])
        self.registry = registry if registry is not None else CommandRegistry()
        self.dispatcher = Dispatcher(self.registry)
        self.probes = probes if probes is not None else default_registry()
        self.sessions = SessionResolver(self.get_config, self._create_session)
        self._deps = deps
        self._config: dict[str, Any] | None = None

        config_option = self.options.get("config")
        if config_option:
            self.base = os.path.dirname(config_option)
            self.config_path = self.resolve_path(config_option)
        else:
            self.base = base
            self.config_path = os.path.join(base, CONFIG_FILENAME)

    @property
    def deps(self) -> Dependencies:
        if self._deps is None:
            self._deps = Dependencies.create()
        return self._deps

    def resolve_path(self, *parts: str) -> str:
        """Join parts and expand a leading ~."""
        return os.path.expanduser(os.path.join(*parts))

    def get_args(self) -> list[str]:
        return self.args

    def get_base_path(self) -> str:
        return self.base

    def get_verbose(self) -> bool:
        return bool(self.options.get("verbose", False))

    def get_options(self) -> dict[str, Any]:
        return self.options

    def get_config(self) -> dict[str, Any]:
        """Project config, read from config_path on first call.

        Raises:
            ConfigError: If the file is missing or invalid
        """
        if self._config is None:
            self._config = load_project_config(self.config_path)
        return self._config

    def set_config(self, config: dict[str, Any]) -> None:
        """Replace the project config. Sessions are rebuilt on next use."""
        self._config = config
        self.sessions.reset()

    def get_servers(self, names: Iterable[str] | None = None) -> list[SSHHost]:
        """Configured servers, optionally restricted to names.

        Raises:
            ConfigError: If a name is not a configured server
        """
        servers = servers_from_config(self.get_config())
        if names is None:
            return list(servers.values())

        selected = []
        for name in names:
            if name not in servers:
                raise ConfigError(f"Unknown server: {name}")
            selected.append(servers[name])
        return selected

    async def run_command(self, name: str | None = None, *args: Any) -> Any:
        """Run a registered command with its pre and post hooks."""
        return await self.dispatcher.run(self, name, *args)

    def get_sessions(self, plugin_names: Iterable[str]) -> list[Any]:
        """Sessions for the servers the named plugins use."""
        return list(self.sessions.pick(plugin_names).values())

    def get_all_sessions(self) -> list[Any]:
        """One session per configured server."""
        return list(self.sessions.load().values())

    async def run_ssh_command(self, server: str | SSHHost, script: str) -> CommandResult:
        """Run a script on one server and return its combined output."""
        host = server if isinstance(server, SSHHost) else self.get_servers([server])[0]
        return await self.deps.transport.run(host, script)

    async def get_docker_logs(
        self,
        name: str,
        sessions: Iterable[Any],
        args: Iterable[str] = (),
    ) -> dict[str, str]:
        """Run `docker logs <args> <name>` on each session.

        Returns:
            Combined log output keyed by server name
        """
        command = shlex.join(["docker", "logs", *args, name]) + " 2>&1"
        targets = list(sessions)
        results = await asyncio.gather(*(session.run(command) for session in targets))

        logs = {}
        for session, result in zip(targets, results):
            if result.code != 0:
                logger.warning(
                    "docker logs %s on %s exited with %d", name, session.name, result.code
                )
            logs[session.name] = result.output
        return logs

    async def get_server_info(
        self,
        servers: Iterable[str] | None = None,
        probes: Iterable[str] | None = None,
    ) -> FleetResult:
        """Probe servers (default: all) and return results keyed by name."""
        return await get_server_info(
            self.get_servers(servers),
            self.deps.transport,
            registry=self.probes,
            probes=probes,
            concurrency=self.deps.settings.probe_concurrency,
        )

    def _create_session(self, host: SSHHost) -> HostSession:
        return HostSession(host, self.deps.transport)

    async def close(self) -> None:
        """Close SSH connections opened through this API, if any."""
        if self._deps is not None:
            await self._deps.cleanup()
