"""Refresh pinned packages to the latest commit of their branch."""

from pathlib import Path

from bpm.core.exceptions.errors import PackageNotFoundError
from bpm.core.logger.logger import get_logger
from bpm.discovery.identity import vendor_path
from bpm.engine.git_operations import GitOperations
from bpm.engine.reconciler import Reconciler
from bpm.models.lockfile import DependencyEntry

logger = get_logger(__name__)


class Updater:
    """Moves top-level packages forward on their pinned branch.

    Nested dependencies keep their recorded pins; only the selected entries'
    commits change.
    """

    def __init__(
        self,
        git_operations: GitOperations | None = None,
        reconciler: Reconciler | None = None,
    ) -> None:
        self.git_operations = git_operations or GitOperations()
        self.reconciler = reconciler or Reconciler(git_operations=self.git_operations)

    def update(
        self,
        entries: dict[str, DependencyEntry],
        vendor_dir: Path,
        package: str | None = None,
    ) -> list[str]:
        """Update one package, or every top-level package.

        Args:
            entries: Top-level dependency entries, updated in place.
            vendor_dir: Vendor directory holding their checkouts.
            package: Identifier of the only package to update.

        Returns:
            Identifiers whose pinned commit changed.

        Raises:
            PackageNotFoundError: If package is not a top-level entry.
            GitError: If fetching or checkout fails.
        """
        if package is not None and package not in entries:
            raise PackageNotFoundError(package)

        selected = [package] if package is not None else sorted(entries)
        updated: list[str] = []

        for identifier in selected:
            entry = entries[identifier]
            if not entry.branch:
                logger.warning(f"Skipping {identifier}: no branch pinned")
                continue

            # Materialize the recorded state first so the checkout exists
            self.reconciler.pin_entry(identifier, entry, vendor_dir)

            latest = self.git_operations.update_to_latest(
                vendor_path(vendor_dir, identifier), entry.branch
            )
            if latest != entry.commit:
                logger.info(f"Updated {identifier}: {entry.commit[:8]} -> {latest[:8]}")
                entry.commit = latest
                updated.append(identifier)
            else:
                logger.info(f"{identifier} is up to date on {entry.branch}")

        return updated
