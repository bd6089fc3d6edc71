"""flotilla FastMCP server.

A thin surface over PluginAPI: one tool to run registered commands, one to
probe servers, a resource listing commands, and an HTTP health route.
"""

import json
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from flotilla.api import PluginAPI
from flotilla.config import Settings
from flotilla.dependencies import Dependencies
from flotilla.dispatch import CommandRegistry
from flotilla.errors import FlotillaError
from flotilla.plugins import load_builtin_plugins

logger = logging.getLogger(__name__)


def default_api() -> PluginAPI:
    """Build the API from environment settings and built-in plugins."""
    settings = Settings.from_env()
    options = {"config": settings.config_path} if settings.config_path else {}
    return PluginAPI(
        os.getcwd(),
        options=options,
        deps=Dependencies.from_settings(settings),
        registry=load_builtin_plugins(CommandRegistry()),
    )


def create_server(api_factory: Callable[[], PluginAPI] = default_api) -> FastMCP:
    """Create the MCP server.

    Args:
        api_factory: Builds the PluginAPI on first use

    Returns:
        Configured FastMCP server instance
    """
    state: dict[str, PluginAPI] = {}

    def get_api() -> PluginAPI:
        if "api" not in state:
            state["api"] = api_factory()
        return state["api"]

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        api = get_api()
        logger.info(
            "flotilla server starting (%d command(s) registered)",
            len(api.registry.commands),
        )
        try:
            yield {"commands": api.registry.command_names()}
        finally:
            logger.info("flotilla server shutting down")
            await api.close()

    server = FastMCP("flotilla", lifespan=lifespan)

    async def run_command(name: str, args: list[str] | None = None) -> str:
        """Run a registered command (for example "fleet.info") with its hooks.

        Args:
            name: Dotted command name
            args: Extra string arguments passed to the command

        Returns:
            The command result as JSON, or an error message
        """
        try:
            result = await get_api().run_command(name, *(args or []))
        except FlotillaError as e:
            logger.warning("Command %s failed: %s", name, e)
            return f"Error: {e}"
        if result is None:
            return "(no result)"
        return json.dumps(result, indent=2, default=str)

    async def server_info(
        servers: list[str] | None = None,
        probes: list[str] | None = None,
    ) -> dict[str, Any]:
        """Probe Docker/Swarm state on configured servers.

        Args:
            servers: Server names (default: all configured servers)
            probes: Probe names (default: all probes)

        Returns:
            Probe results keyed by server name
        """
        return await get_api().get_server_info(servers, probes)

    async def list_commands() -> str:
        """Registered commands and the plugin that provides each."""
        registry = get_api().registry
        lines = [
            f"{name} ({registry.commands[name].plugin or 'unknown'})"
            for name in registry.command_names()
        ]
        return "\n".join(lines) if lines else "No commands registered."

    server.tool()(run_command)
    server.tool()(server_info)
    server.resource("fleet://commands")(list_commands)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        return PlainTextResponse("OK")

    return server


mcp = create_server()
