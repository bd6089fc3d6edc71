"""Application settings from environment variables."""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Settings read from FLOTILLA_* environment variables.

    Invalid values fall back to defaults with a warning.
    """

    # Probing
    probe_concurrency: int = field(default=2)
    command_timeout: int = field(default=30)

    # Connection pool
    idle_timeout: int = field(default=60)
    max_pool_size: int = field(default=100)
    known_hosts: str | None = field(default=None)
    strict_host_key_checking: bool = field(default=True)

    # Server transport
    transport: str = field(default="stdio")
    http_host: str = field(default="127.0.0.1")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    # Project
    config_path: str | None = field(default=None)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            probe_concurrency=cls._get_positive_int("FLOTILLA_PROBE_CONCURRENCY", 2),
            command_timeout=cls._get_positive_int("FLOTILLA_COMMAND_TIMEOUT", 30),
            idle_timeout=cls._get_positive_int("FLOTILLA_IDLE_TIMEOUT", 60),
            max_pool_size=cls._get_positive_int("FLOTILLA_MAX_POOL_SIZE", 100),
            known_hosts=cls._get_known_hosts(),
            strict_host_key_checking=cls._get_bool(
                "FLOTILLA_STRICT_HOST_KEY_CHECKING", True
            ),
            transport=cls._get_transport(),
            http_host=os.getenv("FLOTILLA_HTTP_HOST", "127.0.0.1"),
            http_port=cls._get_positive_int("FLOTILLA_HTTP_PORT", 8000),
            log_level=os.getenv("FLOTILLA_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("FLOTILLA_LOG_COLORS", True),
            config_path=os.getenv("FLOTILLA_CONFIG") or None,
        )

    @staticmethod
    def _get_positive_int(key: str, default: int) -> int:
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("%s must be > 0, got %d, using default %d", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_known_hosts() -> str | None:
        """known_hosts path; "none" disables host key verification.

        Defaults to ~/.ssh/known_hosts.
        """
        value = os.getenv("FLOTILLA_KNOWN_HOSTS", "").strip()
        if value.lower() == "none":
            return None
        if value:
            return os.path.expanduser(value)
        return os.path.expanduser("~/.ssh/known_hosts")

    @staticmethod
    def _get_transport() -> str:
        transport = os.getenv("FLOTILLA_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "stdio"
