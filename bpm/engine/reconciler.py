"""Bring vendored checkouts into agreement with a lockfile."""

from collections.abc import Callable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from bpm.core.config.settings import get_settings
from bpm.core.logger.logger import get_logger
from bpm.discovery.identity import package_url, vendor_path
from bpm.engine.git_operations import GitOperations
from bpm.engine.vendor import ensure_dir
from bpm.models.lockfile import DependencyEntry

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass
class PinOutcome:
    """What pinning a single entry required."""

    cloned: bool = False
    checkouts: int = 0


@dataclass
class ReconcileReport:
    """Summary of a reconciliation run."""

    clones: int = 0
    checkouts: int = 0
    pinned: list[str] = field(default_factory=list)

    def add(self, identifier: str, outcome: PinOutcome) -> None:
        self.pinned.append(identifier)
        self.checkouts += outcome.checkouts
        if outcome.cloned:
            self.clones += 1


class Reconciler:
    """Pins every entry of a lockfile graph to its recorded branch and commit.

    Siblings are pinned concurrently; the next level is only visited once the
    whole level is pinned. Unlike discovery, any failure aborts the run.
    """

    def __init__(
        self,
        git_operations: GitOperations | None = None,
        max_workers: int | None = None,
        vendor_dir_name: str | None = None,
        url_overrides: dict[str, str] | None = None,
        url_scheme: str | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            git_operations: Git operations instance.
            max_workers: Maximum concurrent git tasks per level.
            vendor_dir_name: Name of the vendor directory in every checkout.
            url_overrides: Fetch URL per identifier, used for entries without a URL.
            url_scheme: Scheme used to build fetch URLs from identifiers.
        """
        settings = get_settings()

        self.git_operations = git_operations or GitOperations()
        self.max_workers = max_workers or settings.project.max_workers
        self.vendor_dir_name = vendor_dir_name or settings.project.vendor_dir_name
        self.url_overrides = (
            url_overrides if url_overrides is not None else settings.project.url_overrides
        )
        self.url_scheme = url_scheme or settings.project.url_scheme

    def reconcile(
        self,
        entries: dict[str, DependencyEntry],
        vendor_dir: Path,
        root_identifier: str | None = None,
    ) -> ReconcileReport:
        """Pin a dependency graph, level by level.

        Entries are updated in place when their branch or commit had to be
        backfilled.

        Args:
            entries: Dependency entries keyed by package identifier.
            vendor_dir: Vendor directory holding the entries' checkouts.
            root_identifier: Identifier of the project owning vendor_dir.

        Returns:
            ReconcileReport with the clones and checkouts performed.

        Raises:
            BpmError: On the first failure; no deeper level is visited.
        """
        report = ReconcileReport()
        active_path = frozenset({root_identifier}) if root_identifier else frozenset()
        self._reconcile_level(entries, vendor_dir, active_path, report)
        logger.info(
            f"Pinned {len(report.pinned)} package(s): "
            f"{report.clones} clone(s), {report.checkouts} checkout(s)"
        )
        return report

    def _reconcile_level(
        self,
        entries: dict[str, DependencyEntry],
        vendor_dir: Path,
        active_path: frozenset[str],
        report: ReconcileReport,
    ) -> None:
        level: dict[str, DependencyEntry] = {}
        for identifier, entry in entries.items():
            if identifier in active_path:
                logger.debug(f"Skipping back-reference to {identifier}")
                continue
            level[identifier] = entry

        if not level:
            return

        outcomes = self._run_level(
            {
                identifier: (lambda i=identifier, e=entry: self.pin_entry(i, e, vendor_dir))
                for identifier, entry in level.items()
            }
        )
        for identifier, outcome in outcomes.items():
            report.add(identifier, outcome)

        for identifier, entry in level.items():
            if entry.dependencies:
                self._reconcile_level(
                    entry.dependencies,
                    vendor_path(vendor_dir, identifier) / self.vendor_dir_name,
                    active_path | {identifier},
                    report,
                )

    def _run_level(self, tasks: dict[str, Callable[[], T]]) -> dict[str, T]:
        """Run one task per identifier and join them, failing fast.

        Tasks not yet started when one fails are cancelled; running ones are
        allowed to finish before the first error is re-raised.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[str, Future[T]] = {
                identifier: executor.submit(task) for identifier, task in tasks.items()
            }
            _, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()

        results: dict[str, T] = {}
        for identifier, future in futures.items():
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                logger.error(f"Failed to pin {identifier}: {error}")
                raise error
            results[identifier] = future.result()

        return results

    def pin_entry(
        self,
        identifier: str,
        entry: DependencyEntry,
        vendor_dir: Path,
    ) -> PinOutcome:
        """Make one checkout match its entry, cloning it if needed.

        Args:
            identifier: Package identifier.
            entry: Entry to pin; empty branch/commit/url fields are backfilled.
            vendor_dir: Vendor directory holding the checkout.

        Returns:
            PinOutcome describing the work done.

        Raises:
            GitError: If cloning or checkout fails.
        """
        target = vendor_path(vendor_dir, identifier)
        outcome = PinOutcome()

        if not self.git_operations.is_git_repo(target):
            url = entry.url or package_url(identifier, self.url_overrides, self.url_scheme)
            ensure_dir(target.parent)
            self.git_operations.clone(url, target)
            outcome.cloned = True
            if not entry.url:
                entry.url = url

        branch = self.git_operations.current_branch(target)
        if entry.branch and branch != entry.branch:
            self.git_operations.checkout_branch(target, entry.branch)
            outcome.checkouts += 1
            branch = entry.branch

        commit = self.git_operations.current_commit_hash(target)
        if entry.is_pinned and commit != entry.commit:
            self.git_operations.checkout_commit(target, entry.commit)
            outcome.checkouts += 1
            commit = entry.commit

        if not entry.branch:
            entry.branch = branch
        if not entry.is_pinned:
            entry.commit = commit

        logger.debug(f"Pinned {identifier} to {entry.branch or 'HEAD'}@{entry.commit[:8]}")
        return outcome
