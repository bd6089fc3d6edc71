"""Single-host probing: one remote script run per host."""

import logging
from collections.abc import Iterable
from typing import Any

from flotilla.models import ProbeFrame, SSHHost
from flotilla.probes.codec import decode_frames, encode_script
from flotilla.probes.registry import ProbeRegistry
from flotilla.protocols import Transport

logger = logging.getLogger(__name__)

HOST_KEY = "_host"

HostResult = dict[str, Any]


def create_host_result(
    registry: ProbeRegistry,
    frames: Iterable[ProbeFrame],
    host: str,
) -> HostResult:
    """Assemble a HostResult from decoded frames.

    Every registered probe gets a key; probes without a usable frame are None.
    """
    result: HostResult = {HOST_KEY: host}
    result.update(dict.fromkeys(registry.names()))

    for frame in frames:
        if frame.name not in registry:
            logger.debug("Ignoring frame for unregistered probe %s", frame.name)
            continue
        result[frame.name] = registry.parse(frame)

    return result


async def probe_host(
    transport: Transport,
    host: SSHHost,
    registry: ProbeRegistry,
) -> HostResult | None:
    """Run every probe on host in one remote invocation.

    Returns:
        HostResult, or None if the transport failed for this host.
    """
    script = encode_script(registry)

    try:
        result = await transport.run(host, script)
    except Exception as e:
        logger.error("Probing %s (%s) failed: %s", host.name, host.address, e)
        return None

    frames = decode_frames(result.output)
    if len(frames) != len(registry):
        logger.warning(
            "Expected %d probe frames from %s, decoded %d (exit=%d)",
            len(registry),
            host.name,
            len(frames),
            result.code,
        )
    return create_host_result(registry, frames, host.name)
