"""Plugin data model."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Plugin:
    """A bundle of commands and hooks contributed by one plugin.

    Command names without a dot are namespaced under the plugin name.
    Hook keys are full hook names such as "post.default.deploy".
    """

    name: str
    description: str = ""
    commands: dict[str, Callable[..., Any]] = field(default_factory=dict)
    hooks: dict[str, Any] = field(default_factory=dict)
