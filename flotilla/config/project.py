"""Project configuration file loading.

The project file is a JSON object. Its "servers" section defines every
server the project can reach; plugin sections (for example "app" or
"mongo") list the servers they use:

    {
      "servers": {"one": {"host": "10.0.0.1", "username": "deploy", "pem": "~/.ssh/id"}},
      "app": {"servers": {"one": {}}}
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from flotilla.errors import ConfigError
from flotilla.models import SSHHost

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "flotilla.json"


def load_project_config(path: str | Path) -> dict[str, Any]:
    """Read and decode the project configuration.

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object
    """
    path = Path(path)
    try:
        content = path.read_text()
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        config = json.loads(content)
    except ValueError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")

    logger.debug("Loaded project config from %s", path)
    return config


def servers_from_config(config: dict[str, Any]) -> dict[str, SSHHost]:
    """Build SSHHost entries from the "servers" section.

    Raises:
        ConfigError: If a server entry is not an object or has no host
    """
    servers: dict[str, SSHHost] = {}

    for name, entry in (config.get("servers") or {}).items():
        if not isinstance(entry, dict) or not entry.get("host"):
            raise ConfigError(f"Server {name!r} needs a 'host'")

        pem = entry.get("pem")
        try:
            port = int(entry.get("port", 22))
        except (TypeError, ValueError):
            raise ConfigError(f"Server {name!r} has an invalid port") from None

        servers[name] = SSHHost(
            name=name,
            hostname=entry["host"],
            user=entry.get("username", "root"),
            port=port,
            identity_file=os.path.expanduser(pem) if pem else None,
            password=entry.get("password"),
        )

    return servers
