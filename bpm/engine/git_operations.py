"""Git operations wrapper with retry support."""

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from git import Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from bpm.core.config.settings import get_settings
from bpm.core.exceptions.errors import GitError
from bpm.core.logger.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

GIT_FOLDER_NAME = ".git"


class GitOperations:
    """Handles the git operations needed to fetch and pin dependencies.

    Every method opens the repository afresh, so one instance can be shared
    by concurrent tasks working on different checkouts.
    """

    def __init__(
        self,
        retry_attempts: int | None = None,
        retry_delay: int | None = None,
    ) -> None:
        """Initialize Git operations.

        Args:
            retry_attempts: Number of attempts for clone operations.
            retry_delay: Delay between retries in seconds.
        """
        settings = get_settings()

        self.retry_attempts = retry_attempts or settings.git.retry_attempts
        self.retry_delay = retry_delay or settings.git.retry_delay

    def _retry_operation(
        self,
        operation: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute an operation with retry logic.

        Args:
            operation: Callable to execute.
            *args: Positional arguments for the operation.
            **kwargs: Keyword arguments for the operation.

        Returns:
            Result of the operation.

        Raises:
            GitError: If all attempts fail.
        """
        last_error: GitCommandError | None = None

        for attempt in range(1, self.retry_attempts + 1):
            try:
                return operation(*args, **kwargs)
            except GitCommandError as e:
                last_error = e
                if attempt < self.retry_attempts:
                    logger.warning(
                        f"Git operation failed (attempt {attempt}/{self.retry_attempts}): {e}"
                    )
                    logger.info(f"Retrying in {self.retry_delay} seconds...")
                    time.sleep(self.retry_delay)

        raise GitError(
            f"Git operation failed after {self.retry_attempts} attempt(s)",
            details={"last_error": str(last_error)},
        )

    def is_git_repo(self, path: Path) -> bool:
        """Check if a path already holds a repository.

        Args:
            path: Path to check.

        Returns:
            True if path contains a .git metadata directory.
        """
        return (path / GIT_FOLDER_NAME).exists()

    def open_repo(self, path: Path) -> Repo:
        """Open an existing Git repository.

        Args:
            path: Path to the repository.

        Returns:
            Repo object.

        Raises:
            GitError: If repository cannot be opened.
        """
        try:
            return Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError(
                f"Not a valid Git repository: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

    def clone(self, repo_url: str, target_path: Path) -> Repo:
        """Clone the full history of a repository.

        Args:
            repo_url: URL of the repository to clone.
            target_path: Local path to clone into.

        Returns:
            Cloned Repo object.

        Raises:
            GitError: If clone fails.
        """
        logger.info(f"Pulling package {repo_url} in {target_path}...")

        def _clone() -> Repo:
            return Repo.clone_from(url=repo_url, to_path=str(target_path))

        try:
            repo = self._retry_operation(_clone)
        except GitError as e:
            e.details["repo_url"] = repo_url
            raise

        logger.debug(f"Successfully cloned {repo_url} to {target_path}")
        return repo

    def current_branch(self, path: Path) -> str:
        """Get the checked-out branch name.

        Args:
            path: Repository path.

        Returns:
            Branch name, or an empty string on a detached HEAD.
        """
        repo = self.open_repo(path)
        if repo.head.is_detached:
            return ""
        try:
            return repo.active_branch.name
        except TypeError:
            return ""

    def current_commit_hash(self, path: Path) -> str:
        """Get the full hash of HEAD.

        Args:
            path: Repository path.

        Returns:
            Commit hash.

        Raises:
            GitError: If HEAD does not point at a commit.
        """
        repo = self.open_repo(path)
        try:
            return repo.head.commit.hexsha
        except ValueError as e:
            raise GitError(
                f"Repository has no commits: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

    def checkout_branch(self, path: Path, branch: str) -> None:
        """Switch the working tree to a branch.

        A missing local branch is created from ``origin/<branch>``, fetching
        origin first if the remote branch is not known yet.

        Args:
            path: Repository path.
            branch: Branch name.

        Raises:
            GitError: If the branch does not exist or checkout fails.
        """
        repo = self.open_repo(path)
        logger.info(f"Checking out branch {branch} in {path}")

        try:
            if branch in [h.name for h in repo.heads]:
                repo.heads[branch].checkout()
                return

            remote_branch = f"origin/{branch}"
            if remote_branch not in [ref.name for ref in repo.refs]:
                repo.remote(name="origin").fetch()

            if remote_branch in [ref.name for ref in repo.refs]:
                repo.git.checkout(remote_branch, b=branch)
            else:
                raise GitError(f"Branch not found: {branch}", git_ref=branch)

        except (GitCommandError, ValueError) as e:
            raise GitError(
                f"Failed to checkout branch: {branch}",
                git_ref=branch,
                details={"path": str(path), "error": str(e)},
            ) from e

    def checkout_commit(self, path: Path, commit: str) -> None:
        """Pin the working tree to a commit.

        On a branch, the branch pointer is moved to the commit so the branch
        name is kept. On a detached HEAD the commit is checked out detached.

        Args:
            path: Repository path.
            commit: Commit hash.

        Raises:
            GitError: If the commit is unknown or checkout fails.
        """
        repo = self.open_repo(path)
        logger.info(f"Checking out commit {commit[:8]} in {path}")

        try:
            target = self._resolve_commit(repo, commit)
            if repo.head.is_detached:
                repo.git.checkout(target.hexsha)
            else:
                repo.head.reset(target, index=True, working_tree=True)
        except GitCommandError as e:
            raise GitError(
                f"Failed to checkout commit: {commit}",
                git_ref=commit,
                details={"path": str(path), "error": str(e)},
            ) from e

    def update_to_latest(self, path: Path, branch: str) -> str:
        """Move a branch to the latest commit of its remote counterpart.

        Args:
            path: Repository path.
            branch: Branch to refresh.

        Returns:
            New commit hash.

        Raises:
            GitError: If fetching or checkout fails.
        """
        repo = self.open_repo(path)
        logger.info(f"Fetching latest {branch} in {path}")

        try:
            repo.remote(name="origin").fetch()
            latest = repo.commit(f"origin/{branch}")
        except (GitCommandError, ValueError, BadName, BadObject) as e:
            raise GitError(
                f"Cannot fetch latest commit of branch: {branch}",
                git_ref=branch,
                details={"path": str(path), "error": str(e)},
            ) from e

        self.checkout_branch(path, branch)
        self.checkout_commit(path, latest.hexsha)
        return latest.hexsha

    def remote_url(self, path: Path) -> str | None:
        """Get the URL of the repository's origin (or first) remote.

        Args:
            path: Repository path.

        Returns:
            Remote URL, or None if path is not a repository or has no remote.
        """
        if not self.is_git_repo(path):
            return None

        repo = self.open_repo(path)
        if not repo.remotes:
            return None

        remote = next((r for r in repo.remotes if r.name == "origin"), repo.remotes[0])
        try:
            return remote.url
        except GitCommandError:
            return None

    def _resolve_commit(self, repo: Repo, commit: str) -> Any:
        try:
            return repo.commit(commit)
        except (BadName, BadObject, ValueError):
            logger.debug(f"Commit {commit[:8]} not found locally, fetching origin")

        try:
            repo.remote(name="origin").fetch()
            return repo.commit(commit)
        except (GitCommandError, BadName, BadObject, ValueError) as e:
            raise GitError(
                f"Commit not found: {commit}",
                git_ref=commit,
                details={"error": str(e)},
            ) from e
