"""Built-in "fleet" plugin: server inspection commands."""

import logging
from typing import TYPE_CHECKING

from flotilla.models import Plugin
from flotilla.probes import HOST_KEY, FleetResult
from flotilla.utils.ping import check_hosts_online

if TYPE_CHECKING:
    from flotilla.api import PluginAPI

logger = logging.getLogger(__name__)


async def info(api: "PluginAPI", *servers: str) -> FleetResult:
    """Probe Docker/Swarm state on the given servers (default: all)."""
    result = await api.get_server_info(servers or None)

    for name, host_result in sorted(result.items()):
        missing = [k for k, v in host_result.items() if k != HOST_KEY and v is None]
        if missing:
            logger.info("%s: no value for %s", name, ", ".join(missing))
        else:
            logger.info("%s: all probes reported", name)
    return result


async def ping(api: "PluginAPI", *servers: str) -> dict[str, bool]:
    """Check that each server's SSH port accepts TCP connections."""
    hosts = api.get_servers(servers or None)
    status = await check_hosts_online(
        {host.name: (host.hostname, host.port) for host in hosts}
    )

    for name, online in sorted(status.items()):
        logger.info("%s is %s", name, "online" if online else "offline")
    return status


plugin = Plugin(
    name="fleet",
    description="Inspect configured servers",
    commands={"info": info, "ping": ping},
)
