"""Plugins shipped with flotilla."""

from flotilla.dispatch import CommandRegistry
from flotilla.plugins import fleet

BUILTIN_PLUGINS = [fleet.plugin]


def load_builtin_plugins(registry: CommandRegistry) -> CommandRegistry:
    """Register every built-in plugin into registry and return it."""
    for plugin in BUILTIN_PLUGINS:
        registry.register_plugin(plugin)
    return registry


__all__ = ["BUILTIN_PLUGINS", "load_builtin_plugins"]
