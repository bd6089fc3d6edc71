"""Tests for plugin-scoped session resolution."""

import pytest

from flotilla.dispatch.sessions import HostSession, SessionResolver
from flotilla.models import CommandResult, SSHHost


class CountingFactory:
    """Session factory that counts how many sessions it built."""

    def __init__(self) -> None:
        self.created = 0

    def __call__(self, host: SSHHost) -> dict:
        self.created += 1
        return {"server": host.name}


@pytest.fixture
def factory() -> CountingFactory:
    return CountingFactory()


@pytest.fixture
def resolver(project_config, factory) -> SessionResolver:
    return SessionResolver(lambda: project_config, factory)


def test_sessions_built_lazily(resolver, factory) -> None:
    assert not resolver.loaded
    assert factory.created == 0

    sessions = resolver.load()

    assert resolver.loaded
    assert set(sessions) == {"one", "two"}
    assert factory.created == 2


def test_pick_returns_sessions_for_plugins(resolver) -> None:
    picked = resolver.pick(["app", "mongo"])

    assert picked == {"one": {"server": "one"}, "two": {"server": "two"}}


def test_pick_single_plugin(resolver) -> None:
    assert list(resolver.pick(["mongo"])) == ["two"]


def test_pick_is_idempotent(resolver, factory) -> None:
    first = resolver.pick(["app", "mongo"])
    second = resolver.pick(["app", "mongo"])

    assert first == second
    assert first["one"] is second["one"]
    assert factory.created == 2


def test_plugins_without_servers_contribute_nothing(resolver) -> None:
    assert resolver.pick(["proxy", "unknown"]) == {}


def test_undefined_server_is_skipped(project_config, factory) -> None:
    project_config["app"]["servers"]["ghost"] = {}
    resolver = SessionResolver(lambda: project_config, factory)

    assert set(resolver.pick(["app"])) == {"one"}


def test_reset_rebuilds(resolver, factory) -> None:
    resolver.load()
    resolver.reset()
    resolver.load()

    assert factory.created == 4


@pytest.mark.asyncio
async def test_host_session_runs_through_transport(stub_transport, make_host) -> None:
    transport = stub_transport(responses={"one": CommandResult(output="up 3 days", code=0)})
    session = HostSession(make_host("one"), transport)

    result = await session.run("uptime")

    assert session.name == "one"
    assert result.output == "up 3 days"
    assert transport.calls == [("one", "uptime")]
