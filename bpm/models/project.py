"""Command-level data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from bpm.models.lockfile import Lockfile


class ProjectConfig(BaseModel):
    """Resolved command-line configuration passed to every command handler."""

    project_dir: Path = Field(description="Root directory of the project")
    package: str | None = Field(
        default=None,
        description="Restrict the command to one package identifier",
    )

    model_config = {
        "frozen": True,
    }


class CommandStatus(str, Enum):
    """Outcome of a command."""

    COMPLETED = "completed"
    SKIPPED = "skipped"


class CommandResult(BaseModel):
    """Result of running one bpm command."""

    command: str = Field(description="Command name")
    status: CommandStatus = Field(description="Whether the command did any work")
    message: str = Field(default="", description="User-facing summary")
    lockfile_path: Path | None = Field(
        default=None,
        description="Lockfile read or written by the command",
    )
    lockfile: Lockfile | None = Field(
        default=None,
        description="Dependency graph after the command",
    )
    failures: dict[str, str] = Field(
        default_factory=dict,
        description="Packages that could not be fetched, with the reason",
    )

    @property
    def completed(self) -> bool:
        """Whether the command ran to completion."""
        return self.status == CommandStatus.COMPLETED

    @classmethod
    def completed_result(
        cls,
        command: str,
        message: str,
        lockfile_path: Path,
        lockfile: Lockfile,
        failures: dict[str, str] | None = None,
    ) -> "CommandResult":
        """Create a result for a command that did its work.

        Args:
            command: Command name.
            message: Summary message.
            lockfile_path: Lockfile that was written.
            lockfile: Resulting dependency graph.
            failures: Packages absorbed as fetch failures.

        Returns:
            Completed CommandResult instance.
        """
        return cls(
            command=command,
            status=CommandStatus.COMPLETED,
            message=message,
            lockfile_path=lockfile_path,
            lockfile=lockfile,
            failures=failures or {},
        )

    @classmethod
    def skipped_result(
        cls,
        command: str,
        message: str,
        lockfile_path: Path | None = None,
    ) -> "CommandResult":
        """Create a result for a command that had nothing to do.

        Args:
            command: Command name.
            message: Reason the command was skipped.
            lockfile_path: Lockfile involved, if any.

        Returns:
            Skipped CommandResult instance.
        """
        return cls(
            command=command,
            status=CommandStatus.SKIPPED,
            message=message,
            lockfile_path=lockfile_path,
        )
