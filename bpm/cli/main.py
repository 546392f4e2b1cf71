"""Main CLI entry point for bpm."""

import sys
from pathlib import Path

import click

from bpm.cli.display import show_error, show_result
from bpm.core.config.settings import Settings
from bpm.core.exceptions.errors import BpmError
from bpm.core.logger.logger import setup_logging
from bpm.engine.manager import PackageManager, build_project_config

project_dir_option = click.option(
    "--dir",
    "-d",
    "project_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project directory (defaults to the nearest directory holding bpm.json)",
)


def _execute(
    command: str,
    settings: Settings,
    project_dir: Path | None,
    package: str | None = None,
) -> None:
    """Run one package manager command and display its result."""
    try:
        config = build_project_config(command, project_dir, package, settings=settings)
        manager = PackageManager(settings=settings)
        result = getattr(manager, command)(config)
    except BpmError as e:
        show_error(f"{command.capitalize()} Failed", str(e))
        sys.exit(1)

    show_result(result)


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.pass_context
def main(ctx: click.Context, version: bool, config_path: Path | None) -> None:
    """bpm - a minimal package manager for Go projects.

    Dependencies are cloned into vendor/ and pinned in bpm.json.
    """
    if version:
        from bpm import __version__

        click.echo(f"bpm version {__version__}")
        return

    try:
        settings = Settings.load(config_path)
    except BpmError as e:
        show_error("Configuration Error", str(e))
        sys.exit(1)

    setup_logging(settings.logging)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@project_dir_option
@click.pass_obj
def init(settings: Settings, project_dir: Path | None) -> None:
    """Discover dependencies and write bpm.json.

    Example:
        bpm init --dir ./myproject
    """
    _execute("init", settings, project_dir)


@main.command()
@project_dir_option
@click.pass_obj
def install(settings: Settings, project_dir: Path | None) -> None:
    """Clone and pin every dependency recorded in bpm.json.

    Example:
        bpm install
    """
    _execute("install", settings, project_dir)


@main.command()
@project_dir_option
@click.option("--pkg", "-p", "package", help="Only update this package")
@click.pass_obj
def update(settings: Settings, project_dir: Path | None, package: str | None) -> None:
    """Move packages to the latest commit of their pinned branch.

    Example:
        bpm update --pkg github.com/acme/lib
    """
    _execute("update", settings, project_dir, package)


@main.command()
@project_dir_option
@click.pass_obj
def rebuild(settings: Settings, project_dir: Path | None) -> None:
    """Delete vendor/ and resolve every dependency again.

    Example:
        bpm rebuild
    """
    _execute("rebuild", settings, project_dir)


if __name__ == "__main__":
    main()
