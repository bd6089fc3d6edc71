"""Tests for the FastMCP server surface."""

from unittest.mock import MagicMock

from fastmcp import FastMCP

from flotilla.api import PluginAPI
from flotilla.server import create_server, default_api


def test_create_server() -> None:
    server = create_server(api_factory=MagicMock())

    assert isinstance(server, FastMCP)
    assert server.name == "flotilla"


def test_factory_is_lazy() -> None:
    factory = MagicMock()

    create_server(api_factory=factory)

    factory.assert_not_called()


def test_default_api_registers_builtin_commands(monkeypatch, tmp_path) -> None:
    config = tmp_path / "flotilla.json"
    monkeypatch.setenv("FLOTILLA_CONFIG", str(config))
    monkeypatch.setenv("FLOTILLA_PROBE_CONCURRENCY", "3")

    api = default_api()

    assert isinstance(api, PluginAPI)
    assert api.registry.command_names() == ["fleet.info", "fleet.ping"]
    assert api.config_path == str(config)
    assert api.deps.settings.probe_concurrency == 3
