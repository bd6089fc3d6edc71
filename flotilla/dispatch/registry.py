"""Command and hook registry.

Commands are keyed by dotted name ("<plugin>.<action>"). Registering a name
that is already taken replaces the earlier handler: plugins loaded later
override commands of plugins loaded earlier.

Hooks are keyed by "pre.<command>" or "post.<command>" and kept in
registration order. A hook does not require its command to exist yet.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from flotilla.models import Plugin

logger = logging.getLogger(__name__)

HOOK_STAGES = ("pre", "post")


@dataclass(frozen=True)
class Command:
    """A named handler called as handler(api, *args)."""

    name: str
    handler: Callable[..., Any]
    plugin: str | None = None


@dataclass(frozen=True)
class Hook:
    """One hook action. Exactly one of the three fields is set.

    method is called as method(api, *args); local_command runs in a shell on
    this machine; remote_command runs on every configured server.
    """

    method: Callable[..., Any] | None = None
    local_command: str | None = None
    remote_command: str | None = None
    plugin: str | None = None

    def __post_init__(self) -> None:
        actions = [self.method, self.local_command, self.remote_command]
        if sum(action is not None for action in actions) != 1:
            raise ValueError(
                "Hook needs exactly one of method, local_command, remote_command"
            )

    @property
    def description(self) -> str:
        if self.method is not None:
            return getattr(self.method, "__qualname__", repr(self.method))
        if self.local_command is not None:
            return f"local: {self.local_command}"
        return f"remote: {self.remote_command}"


def hook_key(stage: str, command_name: str) -> str:
    return f"{stage}.{command_name}"


def _make_hook(target: Any, plugin: str | None) -> Hook:
    if isinstance(target, Hook):
        return target
    if callable(target):
        return Hook(method=target, plugin=plugin)
    if isinstance(target, Mapping):
        return Hook(
            method=target.get("method"),
            local_command=target.get("local_command"),
            remote_command=target.get("remote_command"),
            plugin=plugin,
        )
    raise TypeError(f"Unsupported hook target: {target!r}")


class CommandRegistry:
    """Registry of commands and their pre/post hooks."""

    def __init__(self) -> None:
        self.commands: dict[str, Command] = {}
        self.hooks: dict[str, list[Hook]] = {}

    def register_command(
        self,
        name: str,
        handler: Callable[..., Any],
        plugin: str | None = None,
    ) -> None:
        """Register handler under name, replacing any earlier registration.

        Raises:
            ValueError: If name is empty
            TypeError: If handler is not callable
        """
        if not name:
            raise ValueError("Command name is required")
        if not callable(handler):
            raise TypeError(f"Handler for {name} is not callable")

        previous = self.commands.get(name)
        if previous is not None:
            logger.info(
                "Command %s from %s overridden by %s",
                name,
                previous.plugin or "(unknown)",
                plugin or "(unknown)",
            )
        self.commands[name] = Command(name=name, handler=handler, plugin=plugin)

    def unregister_command(self, name: str) -> None:
        self.commands.pop(name, None)

    def register_hook(self, hook_name: str, target: Any, plugin: str | None = None) -> None:
        """Append a hook for "pre.<command>" or "post.<command>".

        Args:
            hook_name: Stage-prefixed command name
            target: A callable, a Hook, or a mapping with one of the keys
                method, local_command, remote_command
            plugin: Name of the contributing plugin, for logging

        Raises:
            ValueError: If hook_name has no valid stage or command
        """
        stage, _, command_name = hook_name.partition(".")
        if stage not in HOOK_STAGES or not command_name:
            raise ValueError(f"Invalid hook name: {hook_name!r}")

        hook = _make_hook(target, plugin)
        self.hooks.setdefault(hook_name, []).append(hook)
        logger.debug("Registered hook %s: %s", hook_name, hook.description)

    def clear_hooks(self, hook_name: str) -> None:
        self.hooks.pop(hook_name, None)

    def register_plugin(self, plugin: Plugin) -> None:
        """Register all commands and hooks of a plugin.

        Command names without a dot are prefixed with the plugin name.
        """
        for name, handler in plugin.commands.items():
            full_name = name if "." in name else f"{plugin.name}.{name}"
            self.register_command(full_name, handler, plugin=plugin.name)

        for hook_name, targets in plugin.hooks.items():
            if not isinstance(targets, list | tuple):
                targets = [targets]
            for target in targets:
                self.register_hook(hook_name, target, plugin=plugin.name)

        logger.debug(
            "Registered plugin %s (%d command(s), %d hook key(s))",
            plugin.name,
            len(plugin.commands),
            len(plugin.hooks),
        )

    def get_command(self, name: str) -> Command | None:
        return self.commands.get(name)

    def has_command(self, name: str) -> bool:
        return name in self.commands

    def command_names(self) -> list[str]:
        return sorted(self.commands)

    def get_hooks(self, stage: str, command_name: str) -> list[Hook]:
        """Hooks for one stage of a command, in registration order."""
        return list(self.hooks.get(hook_key(stage, command_name), ()))
