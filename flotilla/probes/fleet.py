"""Fleet-wide probing with bounded concurrency."""

import asyncio
import logging
from collections.abc import Iterable

from flotilla.models import SSHHost
from flotilla.probes.prober import HostResult, probe_host
from flotilla.probes.registry import ProbeRegistry, default_registry
from flotilla.protocols import Transport

logger = logging.getLogger(__name__)

DEFAULT_PROBE_CONCURRENCY = 2

FleetResult = dict[str, HostResult]


async def get_server_info(
    servers: Iterable[SSHHost],
    transport: Transport,
    registry: ProbeRegistry | None = None,
    probes: Iterable[str] | None = None,
    concurrency: int = DEFAULT_PROBE_CONCURRENCY,
) -> FleetResult:
    """Probe every server and collect results keyed by server name.

    At most ``concurrency`` servers are probed at once. Servers whose
    transport call fails are logged and left out of the result; the call
    itself does not raise for them.

    Args:
        servers: Servers to probe
        transport: Remote execution transport
        registry: Probes to run (default: Docker/Swarm probes)
        probes: Optional subset of probe names to run
        concurrency: Maximum simultaneous transport calls

    Returns:
        Mapping of server name to HostResult

    Raises:
        ValueError: If concurrency is not positive
        KeyError: If probes names an unregistered probe
    """
    if concurrency <= 0:
        raise ValueError(f"concurrency must be > 0, got {concurrency}")

    if registry is None:
        registry = default_registry()
    if probes is not None:
        registry = registry.select(probes)

    servers = list(servers)
    semaphore = asyncio.Semaphore(concurrency)

    logger.info(
        "Probing %d server(s) with %d probe(s) (concurrency=%d)",
        len(servers),
        len(registry),
        concurrency,
    )

    async def probe_single(server: SSHHost) -> HostResult | None:
        async with semaphore:
            return await probe_host(transport, server, registry)

    host_results = await asyncio.gather(*(probe_single(s) for s in servers))

    fleet: FleetResult = {}
    for server, host_result in zip(servers, host_results):
        if host_result is None:
            continue
        fleet[server.name] = host_result

    logger.info(
        "Probing completed: %d of %d server(s) responded",
        len(fleet),
        len(servers),
    )
    return fleet
