"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from bpm.models.lockfile import DependencyEntry, Lockfile
from bpm.models.project import CommandResult

console = Console()


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_info(title: str, message: str) -> None:
    """Display an info message."""
    console.print()
    console.print(
        Panel(
            escape(message),
            title=f"[bold]{escape(title)}[/]",
            border_style="blue",
        )
    )


def _entry_label(identifier: str, entry: DependencyEntry) -> str:
    label = f"[cyan]{escape(identifier)}[/]"
    if entry.branch or entry.commit:
        label += f" [dim]{escape(entry.branch or 'HEAD')}@{entry.commit[:8]}[/]"
    return label


def _add_entries(node: Tree, dependencies: dict[str, DependencyEntry]) -> None:
    for identifier in sorted(dependencies):
        entry = dependencies[identifier]
        child = node.add(_entry_label(identifier, entry))
        _add_entries(child, entry.dependencies)


def show_dependency_tree(lockfile: Lockfile) -> None:
    """Display the dependency graph of a lockfile as a tree.

    Args:
        lockfile: Lockfile to display.
    """
    tree = Tree(f"[bold]{escape(lockfile.package)}[/]")
    _add_entries(tree, lockfile.dependencies)
    console.print()
    console.print(tree)


def show_failures(failures: dict[str, str]) -> None:
    """Display packages that could not be fetched.

    Args:
        failures: Reason per package identifier.
    """
    table = Table(title="[bold]Unresolved Packages[/]", show_header=True)
    table.add_column("Package", style="cyan")
    table.add_column("Reason", style="red")

    for identifier in sorted(failures):
        table.add_row(escape(identifier), escape(failures[identifier]))

    console.print()
    console.print(Panel(table, border_style="yellow"))


def show_result(result: CommandResult) -> None:
    """Display the outcome of a command.

    Args:
        result: Command result to display.
    """
    title = result.command.capitalize()

    if not result.completed:
        show_info(title, result.message)
        return

    if result.lockfile is not None and result.lockfile.dependencies:
        show_dependency_tree(result.lockfile)

    if result.failures:
        show_failures(result.failures)

    message = result.message
    if result.lockfile_path is not None:
        message += f"\nLockfile: {result.lockfile_path}"
    show_success(title, message)
