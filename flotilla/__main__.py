"""Entry point for the flotilla server."""

import logging

from flotilla.config import Settings
from flotilla.server import mcp
from flotilla.utils import configure_logging

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with the configured transport."""
    settings = Settings.from_env()
    configure_logging(settings)

    if settings.transport == "http":
        logger.info(
            "Starting flotilla server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(transport="http", host=settings.http_host, port=settings.http_port)
    else:
        logger.info("Starting flotilla server (transport=stdio)")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
