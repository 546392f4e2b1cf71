"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest
from git import Repo

from bpm.core.config.settings import GitSettings, ProjectSettings, Settings

PROJECT_IDENTIFIER = "example.com/acme/app"
PROJECT_REMOTE = "https://example.com/acme/app.git"


def go_source(package: str, *imports: str) -> str:
    """Build a minimal Go file importing the given paths."""
    lines = [f"package {package}", ""]
    if imports:
        lines.append("import (")
        lines.extend(f'\t"{path}"' for path in imports)
        lines.append(")")
        lines.append("")
    lines.append("func Run() {}")
    return "\n".join(lines) + "\n"


def commit_files(repo: Repo, files: dict[str, str], message: str = "Update") -> str:
    """Write files into a repository's working tree and commit them.

    Returns:
        Hash of the new commit.
    """
    root = Path(repo.working_tree_dir)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    repo.index.add(list(files))
    return repo.index.commit(message).hexsha


class PackageRegistry:
    """Local git repositories standing in for remote Go packages."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.repos: dict[str, Repo] = {}

    @property
    def overrides(self) -> dict[str, str]:
        """Fetch URL per identifier, pointing at the local repositories."""
        return {identifier: repo.working_tree_dir for identifier, repo in self.repos.items()}

    def add(self, identifier: str, *imports: str) -> Repo:
        """Create a package repository whose single Go file imports the given paths."""
        path = self.base_dir.joinpath(*identifier.split("/"))
        path.mkdir(parents=True)
        repo = Repo.init(path)
        commit_files(repo, {"lib.go": go_source(path.name, *imports)}, "Initial commit")
        self.repos[identifier] = repo
        return repo

    def commit(self, identifier: str, message: str = "Update") -> str:
        """Add a commit to a package repository."""
        repo = self.repos[identifier]
        count = len(list(repo.iter_commits()))
        return commit_files(repo, {f"change_{count}.txt": f"{count}\n"}, message)

    def head(self, identifier: str) -> str:
        return self.repos[identifier].head.commit.hexsha

    def branch(self, identifier: str) -> str:
        return self.repos[identifier].active_branch.name


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def empty_temp_dir(temp_dir: Path) -> Path:
    """Create an empty directory for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to empty directory.
    """
    empty_dir = temp_dir / "empty"
    empty_dir.mkdir()
    return empty_dir


@pytest.fixture
def sample_git_repo_with_commits(temp_dir: Path) -> Generator[tuple[Path, Repo], None, None]:
    """Create a Git repository with three commits and a develop branch.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Tuple of (path, repo) for the repository.
    """
    repo_path = temp_dir / "multi_commit_repo"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    commit_files(repo, {"file1.txt": "Content 1\n"}, "First commit")
    commit_files(repo, {"file2.txt": "Content 2\n"}, "Second commit")
    repo.create_head("develop")
    commit_files(repo, {"file3.txt": "Content 3\n"}, "Third commit")

    yield repo_path, repo


@pytest.fixture
def registry(temp_dir: Path) -> PackageRegistry:
    """Registry of local package repositories.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Empty PackageRegistry.
    """
    return PackageRegistry(temp_dir / "remotes")


@pytest.fixture
def make_project(temp_dir: Path) -> Callable[..., Path]:
    """Factory creating the project under test as a git checkout.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Callable taking the import paths of the project's main.go.
    """

    def _make(*imports: str, remote: str | None = PROJECT_REMOTE) -> Path:
        project_dir = temp_dir / "app"
        project_dir.mkdir()
        repo = Repo.init(project_dir)
        commit_files(repo, {"main.go": go_source("main", *imports)}, "Initial commit")
        if remote:
            repo.create_remote("origin", remote)
        return project_dir

    return _make


@pytest.fixture
def make_settings(registry: PackageRegistry) -> Callable[[], Settings]:
    """Factory for settings that resolve packages from the registry.

    Args:
        registry: Package registry fixture.

    Returns:
        Callable building Settings from the registry's current packages.
    """

    def _make() -> Settings:
        return Settings(
            git=GitSettings(retry_attempts=1, retry_delay=1),
            project=ProjectSettings(url_overrides=registry.overrides, max_workers=4),
        )

    return _make
