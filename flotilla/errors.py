"""Exception hierarchy for flotilla."""


class FlotillaError(Exception):
    """Base class for all flotilla errors."""


class ConfigError(FlotillaError):
    """Project configuration is missing or malformed."""


class DispatchError(FlotillaError):
    """A command invocation was rejected before anything ran."""


class MissingNameError(DispatchError):
    """run_command was called without a command name."""

    def __init__(self) -> None:
        super().__init__("Command name is required")


class UnknownCommandError(DispatchError):
    """run_command was called with a name nothing is registered under."""

    def __init__(self, name: str):
        """Initialize unknown command error.

        Args:
            name: The command name that was requested
        """
        self.name = name
        super().__init__(f"Unknown command name: {name}")


class HookError(FlotillaError):
    """A shell-based hook exited with a nonzero status."""

    def __init__(
        self,
        hook_name: str,
        command: str,
        code: int,
        output: str = "",
        host: str | None = None,
    ):
        self.hook_name = hook_name
        self.command = command
        self.code = code
        self.output = output
        self.host = host
        where = f" on {host}" if host else ""
        super().__init__(f"Hook {hook_name} failed{where} (exit {code}): {command}")


class TransportError(FlotillaError):
    """Remote execution on a host failed at the transport level."""

    def __init__(self, host_name: str, original_error: Exception):
        """Initialize transport error.

        Args:
            host_name: Name of the SSH host
            original_error: Original exception that caused the failure
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(f"Cannot run command on {host_name}: {original_error}")


class ProbeDecodeError(FlotillaError):
    """A probe frame in combined output is missing its framing."""

    def __init__(self, message: str, name: str | None = None, output: str = ""):
        """Initialize probe decode error.

        Args:
            message: What was missing from the frame
            name: Probe name, if it could be read
            output: Probe output read so far
        """
        self.name = name
        self.output = output
        super().__init__(message)


class ProbeParseError(FlotillaError):
    """A probe parser could not turn raw output into a value."""
