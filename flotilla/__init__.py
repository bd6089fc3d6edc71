"""flotilla: command/hook dispatch and multi-probe fleet inspection."""

__version__ = "0.1.0"
