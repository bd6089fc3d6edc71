"""Command dispatch with pre/post hooks.

Order for one invocation:

1. reject a missing or unregistered name (nothing runs)
2. "pre.<name>" hooks, one at a time, in registration order
3. the command handler
4. "post.<name>" hooks, one at a time, in registration order

If the handler or a hook raises, the exception propagates to the caller and
nothing after it runs, so post hooks only ever observe a successful handler.
"""

import asyncio
import inspect
import logging
import os
from typing import TYPE_CHECKING, Any

from flotilla.dispatch.registry import CommandRegistry, Hook, hook_key
from flotilla.errors import HookError, MissingNameError, UnknownCommandError

if TYPE_CHECKING:
    from flotilla.api import PluginAPI

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Dispatcher:
    """Runs registered commands with their hooks."""

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry

    async def run(self, api: "PluginAPI", name: str | None, *args: Any) -> Any:
        """Run the command registered under name.

        Args:
            api: Passed as first argument to the handler and method hooks
            name: Dotted command name
            *args: Extra arguments for the handler and method hooks

        Returns:
            Whatever the handler returned (awaited if awaitable)

        Raises:
            MissingNameError: If name is empty
            UnknownCommandError: If nothing is registered under name
            HookError: If a shell hook exits nonzero
        """
        if not name:
            raise MissingNameError()

        command = self.registry.get_command(name)
        if command is None:
            raise UnknownCommandError(name)

        await self._run_hooks(api, "pre", name, args)

        logger.info("Running command %s", name)
        result = await _resolve(command.handler(api, *args))
        logger.debug("Command %s completed", name)

        await self._run_hooks(api, "post", name, args)
        return result

    async def _run_hooks(
        self,
        api: "PluginAPI",
        stage: str,
        name: str,
        args: tuple[Any, ...],
    ) -> None:
        key = hook_key(stage, name)
        for hook in self.registry.get_hooks(stage, name):
            logger.debug("Running hook %s: %s", key, hook.description)
            await self._run_hook(api, key, hook, args)

    async def _run_hook(
        self,
        api: "PluginAPI",
        key: str,
        hook: Hook,
        args: tuple[Any, ...],
    ) -> None:
        if hook.method is not None:
            await _resolve(hook.method(api, *args))
        elif hook.local_command is not None:
            await self._run_local(api, key, hook.local_command)
        elif hook.remote_command is not None:
            await self._run_remote(api, key, hook.remote_command)

    async def _run_local(self, api: "PluginAPI", key: str, command: str) -> None:
        # base is "" for a bare config filename and may start with ~
        cwd = os.path.expanduser(api.get_base_path()) or os.getcwd()
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        stdout, _ = await proc.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""

        if proc.returncode != 0:
            raise HookError(key, command, proc.returncode, output)  # type: ignore[arg-type]
        if api.get_verbose() and output:
            logger.info("%s output:\n%s", key, output.rstrip())

    async def _run_remote(self, api: "PluginAPI", key: str, command: str) -> None:
        sessions = api.get_all_sessions()
        if not sessions:
            logger.warning("Hook %s has a remote command but no servers", key)
            return

        results = await asyncio.gather(
            *(session.run(command) for session in sessions),
            return_exceptions=True,
        )

        for session, result in zip(sessions, results):
            if isinstance(result, BaseException):
                logger.error("Hook %s could not run on %s: %s", key, session.name, result)
                raise HookError(key, command, -1, str(result), host=session.name) from result
            if result.code != 0:
                raise HookError(key, command, result.code, result.output, host=session.name)
            if api.get_verbose() and result.output:
                logger.info("%s output on %s:\n%s", key, session.name, result.output.rstrip())
