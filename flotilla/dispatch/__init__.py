"""Command/hook dispatch and session resolution."""

from flotilla.dispatch.engine import Dispatcher
from flotilla.dispatch.registry import HOOK_STAGES, Command, CommandRegistry, Hook, hook_key
from flotilla.dispatch.sessions import HostSession, SessionResolver

__all__ = [
    "Command",
    "CommandRegistry",
    "Dispatcher",
    "HOOK_STAGES",
    "Hook",
    "HostSession",
    "SessionResolver",
    "hook_key",
]
