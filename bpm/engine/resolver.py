"""Recursive dependency discovery."""

from pathlib import Path

from bpm.core.config.settings import get_settings
from bpm.core.exceptions.errors import GitError
from bpm.core.logger.logger import get_logger
from bpm.discovery.go_imports import GoImportExtractor
from bpm.discovery.identity import identifier_from_url, vendor_path
from bpm.discovery.matcher import PackagePathMatcher
from bpm.discovery.scanner import SourceScanner
from bpm.engine.fetcher import ConcurrentFetcher
from bpm.engine.git_operations import GitOperations
from bpm.models.lockfile import DependencyEntry, Lockfile

logger = get_logger(__name__)


class DependencyResolver:
    """Builds the dependency graph of a project by crawling imports.

    Each level is discovered from the sources of one checkout, fetched
    concurrently into that checkout's vendor directory, and then every
    fetched package is resolved in turn. Packages already being resolved
    higher up the same path are recorded as back-references instead of
    being fetched again, so cyclic graphs terminate.
    """

    def __init__(
        self,
        git_operations: GitOperations | None = None,
        fetcher: ConcurrentFetcher | None = None,
        scanner: SourceScanner | None = None,
        extractor: GoImportExtractor | None = None,
        matcher: PackagePathMatcher | None = None,
        vendor_dir_name: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            git_operations: Git operations instance.
            fetcher: Concurrent fetcher instance.
            scanner: Source scanner instance.
            extractor: Import extractor instance.
            matcher: Package path matcher instance.
            vendor_dir_name: Name of the vendor directory in every checkout.
        """
        settings = get_settings()

        self.git_operations = git_operations or GitOperations()
        self.fetcher = fetcher or ConcurrentFetcher(git_operations=self.git_operations)
        self.vendor_dir_name = vendor_dir_name or settings.project.vendor_dir_name
        self.scanner = scanner or SourceScanner(vendor_dir_name=self.vendor_dir_name)
        self.extractor = extractor or GoImportExtractor()
        self.matcher = matcher or PackagePathMatcher()
        self.failures: dict[str, str] = {}

    def project_identity(self, project_dir: Path) -> str | None:
        """Determine a project's package identifier from its git remote.

        Args:
            project_dir: Project root directory.

        Returns:
            Package identifier, or None if it cannot be determined.
        """
        url = self.git_operations.remote_url(project_dir)
        if url is None:
            logger.warning(f"No git remote found for {project_dir}")
            return None

        identifier = identifier_from_url(url)
        if identifier is None:
            logger.warning(f"Remote URL {url} is not a host-qualified package path")
        return identifier

    def resolve_project(self, project_dir: Path, identifier: str | None = None) -> Lockfile | None:
        """Resolve the full dependency graph of a project.

        Args:
            project_dir: Project root directory.
            identifier: Project identifier; looked up from the git remote if omitted.

        Returns:
            Lockfile for the project, or None if its identity is unknown.
        """
        identifier = identifier or self.project_identity(project_dir)
        if identifier is None:
            logger.warning(f"Cannot determine package identity of {project_dir}, nothing to resolve")
            return None

        logger.info(f"Resolving dependencies of {identifier} in {project_dir}")
        self.failures = {}
        dependencies = self.resolve(project_dir, identifier)
        return Lockfile(package=identifier, dependencies=dependencies)

    def resolve(self, directory: Path, self_identifier: str) -> dict[str, DependencyEntry]:
        """Resolve the dependencies of one checkout, recursively.

        Args:
            directory: Checkout directory to scan.
            self_identifier: Package identifier of that checkout.

        Returns:
            Mapping from package identifier to its resolved entry.
        """
        return self._resolve(directory, self_identifier, {self_identifier: directory})

    def _resolve(
        self,
        directory: Path,
        self_identifier: str,
        active_path: dict[str, Path],
    ) -> dict[str, DependencyEntry]:
        files = self.scanner.scan(directory)
        imports = self.extractor.extract_all(files)
        candidates = self.matcher.match(
            (path for paths in imports.values() for path in paths),
            self_identifier,
        )
        if not candidates:
            return {}

        back_references = [c for c in candidates if c in active_path]
        to_fetch = [c for c in candidates if c not in active_path]

        vendor_dir = directory / self.vendor_dir_name
        batch = self.fetcher.fetch(to_fetch, vendor_dir)
        for identifier, reason in batch.failures.items():
            self.failures[identifier] = reason

        entries: dict[str, DependencyEntry] = {}
        for identifier in sorted(batch.entries):
            entry = batch.entries[identifier]
            checkout = vendor_path(vendor_dir, identifier)
            entry.dependencies = self._resolve(
                checkout,
                identifier,
                {**active_path, identifier: checkout},
            )
            entries[identifier] = entry

        for identifier in back_references:
            reference = self._back_reference(identifier, active_path[identifier])
            if reference is not None:
                entries[identifier] = reference

        return entries

    def _back_reference(self, identifier: str, checkout: Path) -> DependencyEntry | None:
        """Entry pointing at a package already being resolved on the current path."""
        logger.info(f"Dependency cycle on {identifier}, recording a back-reference")
        try:
            return DependencyEntry(
                url=self.fetcher.url_for(identifier),
                branch=self.git_operations.current_branch(checkout),
                commit=self.git_operations.current_commit_hash(checkout),
            )
        except GitError as e:
            logger.warning(f"Cannot record back-reference to {identifier}: {e}")
            return None
