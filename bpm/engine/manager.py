"""Command handlers: init, install, update and rebuild."""

from pathlib import Path

from bpm.core.config.settings import Settings, get_settings
from bpm.core.logger.logger import get_logger
from bpm.discovery.scanner import SourceScanner
from bpm.engine.fetcher import ConcurrentFetcher
from bpm.engine.git_operations import GitOperations
from bpm.engine.reconciler import Reconciler
from bpm.engine.resolver import DependencyResolver
from bpm.engine.updater import Updater
from bpm.engine.vendor import remove_tree
from bpm.lockfile.io import find_lockfile_dir, load_lockfile, save_lockfile
from bpm.models.project import CommandResult, ProjectConfig

logger = get_logger(__name__)


def build_project_config(
    command: str,
    project_dir: Path | None = None,
    package: str | None = None,
    settings: Settings | None = None,
    cwd: Path | None = None,
) -> ProjectConfig:
    """Build the configuration a command runs with.

    An explicit directory always wins. Otherwise ``init`` works in the current
    directory, while the other commands use the nearest ancestor holding a
    lockfile and fall back to the current directory.

    Args:
        command: Command name.
        project_dir: Directory given on the command line.
        package: Package identifier given on the command line.
        settings: Settings providing the lockfile name.
        cwd: Directory to start from (defaults to the working directory).

    Returns:
        ProjectConfig for the command.
    """
    settings = settings or get_settings()
    cwd = cwd or Path.cwd()

    if project_dir is None:
        project_dir = cwd
        if command != "init":
            found = find_lockfile_dir(cwd, settings.project.lockfile_name)
            if found is not None:
                project_dir = found

    return ProjectConfig(project_dir=project_dir.resolve(), package=package)


class PackageManager:
    """Runs bpm commands against a project directory.

    Fatal failures propagate as BpmError; discovery failures for single
    packages are absorbed and reported in the result.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        git_operations: GitOperations | None = None,
        resolver: DependencyResolver | None = None,
        reconciler: Reconciler | None = None,
        updater: Updater | None = None,
    ) -> None:
        """Initialize the package manager.

        Args:
            settings: Application settings.
            git_operations: Git operations instance shared by all components.
            resolver: Dependency resolver for init and rebuild.
            reconciler: Reconciler for install.
            updater: Updater for update.
        """
        self.settings = settings or get_settings()
        project = self.settings.project

        self.git_operations = git_operations or GitOperations(
            retry_attempts=self.settings.git.retry_attempts,
            retry_delay=self.settings.git.retry_delay,
        )
        self.resolver = resolver or DependencyResolver(
            git_operations=self.git_operations,
            fetcher=ConcurrentFetcher(
                git_operations=self.git_operations,
                max_workers=project.max_workers,
                url_overrides=project.url_overrides,
                url_scheme=project.url_scheme,
            ),
            scanner=SourceScanner(
                vendor_dir_name=project.vendor_dir_name,
                extensions=project.source_extensions,
            ),
            vendor_dir_name=project.vendor_dir_name,
        )
        self.reconciler = reconciler or Reconciler(
            git_operations=self.git_operations,
            max_workers=project.max_workers,
            vendor_dir_name=project.vendor_dir_name,
            url_overrides=project.url_overrides,
            url_scheme=project.url_scheme,
        )
        self.updater = updater or Updater(
            git_operations=self.git_operations,
            reconciler=self.reconciler,
        )

    def lockfile_path(self, config: ProjectConfig) -> Path:
        return config.project_dir / self.settings.project.lockfile_name

    def vendor_dir(self, config: ProjectConfig) -> Path:
        return config.project_dir / self.settings.project.vendor_dir_name

    def init(self, config: ProjectConfig) -> CommandResult:
        """Discover dependencies and write a fresh lockfile.

        Args:
            config: Project configuration.

        Returns:
            CommandResult; skipped if a lockfile already exists or the
            project identity cannot be determined.
        """
        lockfile_path = self.lockfile_path(config)
        logger.info(f"Working dir: {config.project_dir}")

        if lockfile_path.exists():
            return CommandResult.skipped_result(
                "init",
                f"{lockfile_path.name} already exists: {lockfile_path}",
                lockfile_path=lockfile_path,
            )

        return self._discover("init", config)

    def install(self, config: ProjectConfig) -> CommandResult:
        """Pin every vendored dependency to the lockfile.

        Args:
            config: Project configuration.

        Returns:
            CommandResult; skipped if there is no lockfile.
        """
        lockfile_path = self.lockfile_path(config)
        logger.info(f"Working dir: {config.project_dir}")

        if not lockfile_path.exists():
            return CommandResult.skipped_result(
                "install",
                f"No {lockfile_path.name} found in {config.project_dir}, run init first",
            )

        lockfile = load_lockfile(lockfile_path)
        report = self.reconciler.reconcile(
            lockfile.dependencies,
            self.vendor_dir(config),
            root_identifier=lockfile.package or None,
        )
        save_lockfile(lockfile, lockfile_path)

        return CommandResult.completed_result(
            "install",
            f"Installed {len(report.pinned)} package(s) "
            f"({report.clones} cloned, {report.checkouts} checkout(s))",
            lockfile_path=lockfile_path,
            lockfile=lockfile,
        )

    def update(self, config: ProjectConfig) -> CommandResult:
        """Move one or all top-level packages to the latest commit of their branch.

        Args:
            config: Project configuration; ``package`` restricts the update.

        Returns:
            CommandResult; skipped if there is no lockfile.
        """
        lockfile_path = self.lockfile_path(config)
        logger.info(f"Working dir: {config.project_dir}")

        if not lockfile_path.exists():
            return CommandResult.skipped_result(
                "update",
                f"No {lockfile_path.name} found in {config.project_dir}, run init first",
            )

        lockfile = load_lockfile(lockfile_path)
        updated = self.updater.update(
            lockfile.dependencies,
            self.vendor_dir(config),
            package=config.package,
        )
        save_lockfile(lockfile, lockfile_path)

        if updated:
            message = f"Updated {len(updated)} package(s): {', '.join(updated)}"
        else:
            message = "All packages are up to date"

        return CommandResult.completed_result(
            "update",
            message,
            lockfile_path=lockfile_path,
            lockfile=lockfile,
        )

    def rebuild(self, config: ProjectConfig) -> CommandResult:
        """Forget all vendored state and resolve dependencies from scratch.

        Args:
            config: Project configuration.

        Returns:
            CommandResult; skipped if the project identity cannot be determined.
        """
        logger.info(f"Working dir: {config.project_dir}")

        identifier = self.resolver.project_identity(config.project_dir)
        if identifier is None:
            return self._unknown_identity("rebuild", config)

        remove_tree(self.vendor_dir(config))
        return self._discover("rebuild", config, identifier)

    def _discover(
        self,
        command: str,
        config: ProjectConfig,
        identifier: str | None = None,
    ) -> CommandResult:
        lockfile = self.resolver.resolve_project(config.project_dir, identifier)
        if lockfile is None:
            return self._unknown_identity(command, config)

        lockfile_path = self.lockfile_path(config)
        save_lockfile(lockfile, lockfile_path)

        failures = dict(self.resolver.failures)
        message = f"Resolved {lockfile.count()} package(s) for {lockfile.package}"
        if failures:
            message += f", {len(failures)} could not be fetched"

        return CommandResult.completed_result(
            command,
            message,
            lockfile_path=lockfile_path,
            lockfile=lockfile,
            failures=failures,
        )

    @staticmethod
    def _unknown_identity(command: str, config: ProjectConfig) -> CommandResult:
        return CommandResult.skipped_result(
            command,
            f"Cannot determine the package identity of {config.project_dir}: "
            "no git remote with a host-qualified URL",
        )
