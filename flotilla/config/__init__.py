"""Configuration for flotilla.

- Settings: environment variables
- load_project_config / servers_from_config: the project JSON file
"""

from flotilla.config.project import CONFIG_FILENAME, load_project_config, servers_from_config
from flotilla.config.settings import Settings

__all__ = ["CONFIG_FILENAME", "Settings", "load_project_config", "servers_from_config"]
