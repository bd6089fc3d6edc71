"""Remote command result model."""

from dataclasses import dataclass


@dataclass
class CommandResult:
    """Combined output and exit status of one remote script run."""

    output: str
    code: int

    @property
    def ok(self) -> bool:
        """True when the script exited with status 0."""
        return self.code == 0
