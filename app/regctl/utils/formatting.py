"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from regctl.core.theme import get_theme

if TYPE_CHECKING:
    from regctl.models.context_menu import ContextMenuEntry
    from regctl.models.result import MutationResult
    from regctl.models.startup import StartupEntry


def _detect_color_system() -> str | None:
    """Use truecolor on interactive terminals, otherwise let Rich auto-detect."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def _state_icon(enabled: bool) -> str:
    if enabled:
        return "[entry_enabled]●[/]"  # Filled circle
    return "[entry_disabled]○[/]"  # Empty circle


def _scope(is_system_level: bool) -> str:
    if is_system_level:
        return "[scope_system]system[/]"
    return "[scope_user]user[/]"


def _table(title: str) -> Table:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    return table


def create_context_menu_table(title: str = "Context Menu Entries") -> Table:
    """Create a pre-configured table for context-menu entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with state, name, key, contexts, scope and command columns.
    """
    table = _table(title)
    table.add_column("Name", no_wrap=True)
    table.add_column("Key", style="muted")
    table.add_column("Contexts", style="info")
    table.add_column("Scope")
    table.add_column("Command", style="text", overflow="ellipsis")
    return table


def format_context_menu_row(entry: ContextMenuEntry) -> tuple[str, str, str, str, str, str]:
    """Format a context-menu entry as a table row with Rich markup."""
    style = "entry_enabled" if entry.enabled else "entry_disabled"
    name = f"[{style}]{escape(entry.display_name)}[/]"
    if entry.visibility.value != "normal":
        name += f" [muted]({entry.visibility.value})[/]"
    return (
        _state_icon(entry.enabled),
        name,
        f"[muted]{escape(entry.key)}[/]",
        f"[info]{entry.contexts_display}[/]",
        _scope(entry.is_system_level),
        f"[text]{escape(entry.command)}[/]",
    )


def create_startup_table(title: str = "Startup Entries") -> Table:
    """Create a pre-configured table for startup entries."""
    table = _table(title)
    table.add_column("Name", no_wrap=True)
    table.add_column("Location", style="info")
    table.add_column("Publisher", style="muted")
    table.add_column("Command", style="text", overflow="ellipsis")
    return table


def format_startup_row(entry: StartupEntry) -> tuple[str, str, str, str, str]:
    """Format a startup entry as a table row with Rich markup."""
    style = "entry_enabled" if entry.enabled else "entry_disabled"
    return (
        _state_icon(entry.enabled),
        f"[{style}]{escape(entry.name)}[/]",
        f"[info]{entry.kind.label}[/]",
        f"[muted]{entry.publisher or '-'}[/]",
        f"[text]{escape(entry.command)}[/]",
    )


def print_mutation_result(result: MutationResult) -> None:
    """Print the per-location outcome of an operation."""
    for outcome in result.outcomes:
        if outcome.dry_run:
            console.print(f"  [muted]would {result.operation.value}[/] {outcome.location}")
        elif not outcome.success:
            err_console.print(f"  [error]✗[/] {outcome.location}: {outcome.error}")
        elif outcome.skipped:
            console.print(f"  [muted]- {outcome.location} (nothing to change)[/]")
        else:
            console.print(f"  [success]✓[/] {outcome.location}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
