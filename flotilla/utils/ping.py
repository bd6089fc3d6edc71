"""TCP reachability checks."""

import asyncio


async def check_host_online(hostname: str, port: int, timeout: float = 2.0) -> bool:
    """True if a TCP connection to hostname:port opens within timeout."""
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(hostname, port),
            timeout=timeout,
        )
        writer.close()
        await writer.wait_closed()
        return True
    except (TimeoutError, OSError):
        return False


async def check_hosts_online(
    hosts: dict[str, tuple[str, int]],
    timeout: float = 2.0,
) -> dict[str, bool]:
    """Check {name: (hostname, port)} concurrently, returning {name: online}."""
    if not hosts:
        return {}

    names = list(hosts)
    results = await asyncio.gather(
        *(check_host_online(hostname, port, timeout) for hostname, port in hosts.values())
    )
    return dict(zip(names, results))
