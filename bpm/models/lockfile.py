"""Dependency graph data models persisted in the lockfile."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DependencyEntry(BaseModel):
    """A resolved or pinned dependency and its own nested graph."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(
        default="",
        description="Fetch URL of the dependency",
    )
    branch: str = Field(
        default="",
        description="Branch the checkout is pinned to (empty = detached HEAD)",
    )
    commit: str = Field(
        default="",
        description="Commit hash the checkout is pinned to",
    )
    dependencies: dict[str, "DependencyEntry"] = Field(
        default_factory=dict,
        description="Nested dependencies keyed by package identifier",
    )

    @field_validator("url", "branch", "commit", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat null optional fields as empty strings."""
        return "" if v is None else v

    @field_validator("dependencies", mode="before")
    @classmethod
    def none_to_empty_mapping(cls, v: Any) -> Any:
        """Treat a null dependency mapping as an empty one."""
        return {} if v is None else v

    @property
    def is_pinned(self) -> bool:
        """Whether a commit has been recorded for this entry."""
        return bool(self.commit)

    def count(self) -> int:
        """Count this entry's nested dependencies at every depth."""
        return sum(1 + child.count() for child in self.dependencies.values())


DependencyEntry.model_rebuild()


class Lockfile(BaseModel):
    """Root of the dependency graph for one project."""

    model_config = ConfigDict(extra="ignore")

    package: str = Field(
        default="",
        description="Package identifier of the project itself",
    )
    dependencies: dict[str, DependencyEntry] = Field(
        default_factory=dict,
        description="Direct dependencies keyed by package identifier",
    )

    @field_validator("package", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat a null package as an empty string."""
        return "" if v is None else v

    @field_validator("dependencies", mode="before")
    @classmethod
    def none_to_empty_mapping(cls, v: Any) -> Any:
        """Treat a null dependency mapping as an empty one."""
        return {} if v is None else v

    def count(self) -> int:
        """Count every dependency entry reachable from the root."""
        return sum(1 + entry.count() for entry in self.dependencies.values())
