"""Data models for flotilla."""

from flotilla.models.command import CommandResult
from flotilla.models.plugin import Plugin
from flotilla.models.probe import Probe, ProbeFrame
from flotilla.models.ssh import PooledConnection, SSHHost

__all__ = [
    "CommandResult",
    "Plugin",
    "PooledConnection",
    "Probe",
    "ProbeFrame",
    "SSHHost",
]
