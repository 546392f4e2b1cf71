"""Data models for bpm."""

from bpm.models.lockfile import DependencyEntry, Lockfile
from bpm.models.project import CommandResult, CommandStatus, ProjectConfig

__all__ = [
    "CommandResult",
    "CommandStatus",
    "DependencyEntry",
    "Lockfile",
    "ProjectConfig",
]
