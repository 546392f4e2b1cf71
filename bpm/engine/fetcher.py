"""Concurrent cloning of newly discovered dependencies."""

import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from bpm.core.config.settings import get_settings
from bpm.core.exceptions.errors import GitError
from bpm.core.logger.logger import get_logger
from bpm.discovery.identity import package_url, vendor_path
from bpm.engine.git_operations import GitOperations
from bpm.engine.vendor import ensure_dir
from bpm.models.lockfile import DependencyEntry

logger = get_logger(__name__)


@dataclass
class FetchBatch:
    """Entries fetched for one graph level, plus the packages that failed."""

    entries: dict[str, DependencyEntry] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)


class ConcurrentFetcher:
    """Clones a set of packages in parallel, one task per package.

    A failing clone is logged and reported in the batch; it never cancels
    the other tasks of the same level.
    """

    def __init__(
        self,
        git_operations: GitOperations | None = None,
        max_workers: int | None = None,
        url_overrides: dict[str, str] | None = None,
        url_scheme: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            git_operations: Git operations instance.
            max_workers: Maximum concurrent clones.
            url_overrides: Explicit fetch URL per package identifier.
            url_scheme: Scheme used to build fetch URLs from identifiers.
        """
        settings = get_settings()

        self.git_operations = git_operations or GitOperations()
        self.max_workers = max_workers or settings.project.max_workers
        self.url_overrides = (
            url_overrides if url_overrides is not None else settings.project.url_overrides
        )
        self.url_scheme = url_scheme or settings.project.url_scheme

    def url_for(self, identifier: str) -> str:
        """Fetch URL of a package identifier."""
        return package_url(identifier, self.url_overrides, self.url_scheme)

    def fetch(self, identifiers: list[str], vendor_dir: Path) -> FetchBatch:
        """Fetch every package into the vendor directory.

        Args:
            identifiers: Package identifiers to fetch.
            vendor_dir: Vendor directory of the package that imports them.

        Returns:
            FetchBatch with an entry per successfully fetched package.
        """
        batch = FetchBatch()
        if not identifiers:
            return batch

        ensure_dir(vendor_dir)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_identifier = {
                executor.submit(self.fetch_one, identifier, vendor_dir): identifier
                for identifier in identifiers
            }

            for future in as_completed(future_to_identifier):
                identifier = future_to_identifier[future]
                try:
                    batch.entries[identifier] = future.result()
                except GitError as e:
                    logger.warning(f"Failed to fetch {identifier}: {e}")
                    batch.failures[identifier] = str(e)

        return batch

    def fetch_one(self, identifier: str, vendor_dir: Path) -> DependencyEntry:
        """Clone one package, unless it is already vendored, and read its state.

        Args:
            identifier: Package identifier.
            vendor_dir: Vendor directory to clone into.

        Returns:
            Entry with URL, current branch and current commit.

        Raises:
            GitError: If the clone or the state queries fail.
        """
        target = vendor_path(vendor_dir, identifier)
        url = self.url_for(identifier)
        cloned = not self.git_operations.is_git_repo(target)
        existed = target.exists()

        if cloned:
            ensure_dir(target.parent)
        else:
            logger.info(f"Package {identifier} already vendored in {target}")

        try:
            if cloned:
                self.git_operations.clone(url, target)
            return DependencyEntry(
                url=url,
                branch=self.git_operations.current_branch(target),
                commit=self.git_operations.current_commit_hash(target),
            )
        except GitError:
            if cloned and not existed:
                shutil.rmtree(target, ignore_errors=True)
            raise
