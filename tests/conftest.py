"""Shared test fixtures."""

import asyncio
from collections.abc import Callable

import pytest

from flotilla.errors import TransportError
from flotilla.models import CommandResult, SSHHost


class StubTransport:
    """Transport that answers from a table and records concurrency.

    responses maps host name to either combined output text or a
    CommandResult. Hosts listed in failures raise TransportError.
    """

    def __init__(
        self,
        responses: dict[str, str | CommandResult] | None = None,
        failures: set[str] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.responses = responses or {}
        self.failures = failures or set()
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def run(self, host: SSHHost, script: str) -> CommandResult:
        self.calls.append((host.name, script))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if host.name in self.failures:
                raise TransportError(host.name, OSError("Connection refused"))
            response = self.responses.get(host.name, "")
            if isinstance(response, CommandResult):
                return response
            return CommandResult(output=response, code=0)
        finally:
            self.in_flight -= 1


@pytest.fixture
def stub_transport() -> type[StubTransport]:
    """The StubTransport class, for tests to instantiate."""
    return StubTransport


@pytest.fixture
def make_host() -> Callable[[str], SSHHost]:
    """Factory for SSHHost entries named after their hostname."""

    def factory(name: str) -> SSHHost:
        return SSHHost(name=name, hostname=f"{name}.example.com", user="deploy")

    return factory


@pytest.fixture
def project_config() -> dict:
    """Project config with two servers split across two plugins."""
    return {
        "servers": {
            "one": {"host": "10.0.0.1", "username": "deploy"},
            "two": {"host": "10.0.0.2", "username": "deploy", "port": 2222},
        },
        "app": {"servers": {"one": {}}},
        "mongo": {"servers": {"two": {}}},
        "proxy": {"domains": "example.com"},
    }
