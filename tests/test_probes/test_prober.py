"""Tests for single-host probing."""

import pytest

from flotilla.models import CommandResult, Probe, ProbeFrame
from flotilla.probes.codec import PROBE_NAME_END, PROBE_START, encode_frames
from flotilla.probes.parsers import parse_json, parse_json_lines, parse_text
from flotilla.probes.prober import HOST_KEY, create_host_result, probe_host
from flotilla.probes.registry import ProbeRegistry


@pytest.fixture
def registry() -> ProbeRegistry:
    return ProbeRegistry(
        [
            Probe(name="swarm", command="docker info", parser=parse_json),
            Probe(name="images", command="docker images", parser=parse_json_lines),
            Probe(name="token", command="docker swarm join-token worker -q", parser=parse_text),
        ]
    )


def test_create_host_result_has_every_probe(registry: ProbeRegistry) -> None:
    frames = [ProbeFrame(name="token", output="SWMTKN", exit_code=0)]

    result = create_host_result(registry, frames, "one")

    assert result == {HOST_KEY: "one", "swarm": None, "images": None, "token": "SWMTKN"}


def test_create_host_result_ignores_unknown_frames(registry: ProbeRegistry) -> None:
    frames = [ProbeFrame(name="intruder", output="x", exit_code=0)]

    result = create_host_result(registry, frames, "one")

    assert "intruder" not in result
    assert set(result) == {HOST_KEY, "swarm", "images", "token"}


@pytest.mark.asyncio
async def test_probe_host_single_transport_call(registry, stub_transport, make_host) -> None:
    output = encode_frames(
        [
            ProbeFrame(name="swarm", output='{"LocalNodeState":"active"}', exit_code=0),
            ProbeFrame(name="images", output='{"Repository":"nginx"}\n{"Repository":"redis"}', exit_code=0),
            ProbeFrame(name="token", output="Error response from daemon", exit_code=1),
        ]
    )
    transport = stub_transport(responses={"one": output})

    result = await probe_host(transport, make_host("one"), registry)

    assert len(transport.calls) == 1
    host_name, script = transport.calls[0]
    assert host_name == "one"
    assert script.count(PROBE_START) == 3
    assert result == {
        HOST_KEY: "one",
        "swarm": {"LocalNodeState": "active"},
        "images": [{"Repository": "nginx"}, {"Repository": "redis"}],
        "token": None,
    }


@pytest.mark.asyncio
async def test_probe_host_malformed_frame_is_null(registry, stub_transport, make_host) -> None:
    output = (
        encode_frames([ProbeFrame(name="swarm", output='{"a":1}', exit_code=0)])
        + f"{PROBE_START}images{PROBE_NAME_END}\ntruncated"
    )
    transport = stub_transport(responses={"one": output})

    result = await probe_host(transport, make_host("one"), registry)

    assert result == {HOST_KEY: "one", "swarm": {"a": 1}, "images": None, "token": None}


@pytest.mark.asyncio
async def test_probe_host_unframed_output(registry, stub_transport, make_host) -> None:
    transport = stub_transport(
        responses={"one": CommandResult(output="sh: syntax error", code=2)}
    )

    result = await probe_host(transport, make_host("one"), registry)

    assert result == {HOST_KEY: "one", "swarm": None, "images": None, "token": None}


@pytest.mark.asyncio
async def test_probe_host_transport_failure(registry, stub_transport, make_host) -> None:
    transport = stub_transport(failures={"one"})

    result = await probe_host(transport, make_host("one"), registry)

    assert result is None
