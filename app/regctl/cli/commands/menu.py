"""Menu command implementation.

Lists, enables, disables, deletes and backs up context-menu entries.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from regctl.cli.types import (
    OutputFormat,
    confirm_delete,
    get_config,
    get_store,
    print_json,
    report_mutation,
    run_job,
)
from regctl.context_menu.operator import ContextMenuOperator
from regctl.context_menu.scanner import ContextMenuScanner
from regctl.core.resolver import get_default_resolver
from regctl.models.context_menu import ContextMenuEntry
from regctl.store import RegistryStore
from regctl.utils.formatting import (
    console,
    create_context_menu_table,
    format_context_menu_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage Explorer context-menu entries.",
    no_args_is_help=True,
)

SystemOption = Annotated[
    bool,
    typer.Option(
        "--system",
        help="Include entries that run programs from the Windows directories.",
    ),
]
ComOption = Annotated[
    bool,
    typer.Option(
        "--com",
        help="Include shellex COM handler registrations.",
    ),
]
DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        "-n",
        help="Show what would be done without making changes.",
    ),
]


def _is_quiet(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("quiet", False))


def _discover(
    store: RegistryStore, *, include_system: bool, include_com: bool
) -> list[ContextMenuEntry]:
    config = get_config()
    scanner = ContextMenuScanner(
        store,
        get_default_resolver(),
        include_system_items=include_system or config.include_system_items,
        include_com_handlers=include_com or config.include_com_handlers,
        extra_skip_keys=config.extra_skip_keys,
    )
    return run_job(scanner.discover)


def _find_entry(store: RegistryStore, key: str) -> ContextMenuEntry:
    """Find the single entry registered under a key name.

    All registrations are searched, including system programs and COM
    handlers, so any listed entry can be addressed.

    Raises:
        typer.Exit: If no entry or more than one entry matches.
    """
    matches = [
        entry
        for entry in _discover(store, include_system=True, include_com=True)
        if entry.key.casefold() == key.casefold()
    ]
    if not matches:
        print_error(f"No context-menu entry with key '{key}'.")
        raise typer.Exit(code=1)
    if len(matches) > 1:
        print_error(f"Key '{key}' matches {len(matches)} entries with different programs:")
        for entry in matches:
            console.print(f"  {entry.display_name}: {entry.command}", markup=False)
        raise typer.Exit(code=1)
    return matches[0]


def _entry_to_dict(entry: ContextMenuEntry) -> dict[str, Any]:
    return {
        "key": entry.key,
        "display_name": entry.display_name,
        "command": entry.command,
        "executable": entry.executable,
        "contexts": entry.contexts_display,
        "enabled": entry.enabled,
        "visibility": entry.visibility.value,
        "publisher": entry.publisher,
        "system_level": entry.is_system_level,
        "locations": [location.full_path for location in entry.locations],
    }


@app.command("list")
def list_entries(
    include_system: SystemOption = False,
    include_com: ComOption = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List context-menu entries.

    Examples:
        regctl menu list                    # User-installed verbs
        regctl menu list --com              # Include COM handlers
        regctl menu list --format json      # Output as JSON
    """
    store = get_store()
    entries = _discover(store, include_system=include_system, include_com=include_com)

    if output_format == OutputFormat.JSON:
        print_json([_entry_to_dict(entry) for entry in entries])
        return

    if not entries:
        print_info("No context-menu entries found.")
        return

    table = create_context_menu_table()
    for entry in entries:
        table.add_row(*format_context_menu_row(entry))
    console.print(table)

    disabled = sum(1 for entry in entries if not entry.enabled)
    console.print(f"\n[muted]Total: {len(entries)} entries ({disabled} disabled)[/]")


@app.command()
def enable(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key name of the entry.")],
    dry_run: DryRunOption = False,
) -> None:
    """Enable a context-menu entry at every location."""
    store = get_store()
    entry = _find_entry(store, key)
    result = run_job(ContextMenuOperator(store, dry_run=dry_run).enable, entry)
    report_mutation(result, quiet=_is_quiet(ctx))


@app.command()
def disable(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key name of the entry.")],
    dry_run: DryRunOption = False,
) -> None:
    """Disable a context-menu entry at every location."""
    store = get_store()
    entry = _find_entry(store, key)
    result = run_job(ContextMenuOperator(store, dry_run=dry_run).disable, entry)
    report_mutation(result, quiet=_is_quiet(ctx))


@app.command()
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key name of the entry.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    dry_run: DryRunOption = False,
) -> None:
    """Delete a context-menu entry from every location.

    If ``auto_backup_before_delete`` is set in the configuration, the
    entry is exported to the backup directory first.
    """
    store = get_store()
    config = get_config()
    entry = _find_entry(store, key)

    if not dry_run and not yes and not confirm_delete(entry.display_name):
        print_warning("Aborted.")
        raise typer.Exit(code=0)

    backup_dir = config.effective_backup_dir if config.auto_backup_before_delete else None
    operator = ContextMenuOperator(store, dry_run=dry_run, backup_dir=backup_dir)
    report_mutation(run_job(operator.delete, entry), quiet=_is_quiet(ctx))


@app.command()
def backup(
    destination: Annotated[Path, typer.Argument(help="Output .reg file.")],
    include_system: SystemOption = False,
    include_com: ComOption = False,
) -> None:
    """Export all listed context-menu entries to a .reg file."""
    store = get_store()
    entries = _discover(store, include_system=include_system, include_com=include_com)

    result = run_job(ContextMenuOperator(store).export, entries, destination)
    if not result.success:
        print_error(f"Failed to write backup: {result.error}")
        raise typer.Exit(code=1)

    for message in result.errors:
        print_warning(message)
    print_success(f"Exported {len(entries)} entries to {result.path}")
