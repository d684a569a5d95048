"""Startup command implementation.

Lists, enables, disables, deletes and backs up Run/RunOnce entries.
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
from regctl.models.location import StartupLocationKind
from regctl.models.startup import StartupEntry
from regctl.startup.operator import StartupOperator
from regctl.startup.scanner import StartupScanner
from regctl.store import RegistryStore
from regctl.utils.formatting import (
    console,
    create_startup_table,
    format_startup_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage programs that start at logon.",
    no_args_is_help=True,
)

LocationOption = Annotated[
    StartupLocationKind | None,
    typer.Option(
        "--location",
        "-l",
        help="Run location of the entry, required when the name is registered in several.",
        case_sensitive=False,
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


def _discover(store: RegistryStore, *, include_system: bool = False) -> list[StartupEntry]:
    config = get_config()
    scanner = StartupScanner(
        store, include_system_items=include_system or config.include_system_items
    )
    return run_job(scanner.discover)


def _find_entry(
    store: RegistryStore, name: str, location: StartupLocationKind | None
) -> StartupEntry:
    """Find the single entry with a value name, optionally in one location.

    Raises:
        typer.Exit: If no entry or more than one entry matches.
    """
    matches = [
        entry
        for entry in _discover(store, include_system=True)
        if entry.name.casefold() == name.casefold()
        and (location is None or entry.kind is location)
    ]
    if not matches:
        print_error(f"No startup entry named '{name}'.")
        raise typer.Exit(code=1)
    if len(matches) > 1:
        kinds = ", ".join(entry.kind.value for entry in matches)
        print_error(f"'{name}' is registered in several locations ({kinds}); use --location.")
        raise typer.Exit(code=1)
    return matches[0]


def _entry_to_dict(entry: StartupEntry) -> dict[str, Any]:
    return {
        "name": entry.name,
        "command": entry.command,
        "executable": entry.executable,
        "location": entry.kind.value,
        "registry_path": entry.registry_path,
        "enabled": entry.enabled,
        "publisher": entry.publisher,
        "system_level": entry.is_system_level,
    }


@app.command("list")
def list_entries(
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
    """List startup entries.

    Examples:
        regctl startup list                 # Show table
        regctl startup list --format json   # Output as JSON
    """
    store = get_store()
    entries = _discover(store)

    if output_format == OutputFormat.JSON:
        print_json([_entry_to_dict(entry) for entry in entries])
        return

    if not entries:
        print_info("No startup entries found.")
        return

    table = create_startup_table()
    for entry in entries:
        table.add_row(*format_startup_row(entry))
    console.print(table)

    disabled = sum(1 for entry in entries if not entry.enabled)
    console.print(f"\n[muted]Total: {len(entries)} entries ({disabled} disabled)[/]")


@app.command()
def enable(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Value name of the entry.")],
    location: LocationOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Enable a startup entry."""
    store = get_store()
    entry = _find_entry(store, name, location)
    result = run_job(StartupOperator(store, dry_run=dry_run).enable, entry)
    report_mutation(result, quiet=_is_quiet(ctx))


@app.command()
def disable(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Value name of the entry.")],
    location: LocationOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Disable a startup entry without removing it."""
    store = get_store()
    entry = _find_entry(store, name, location)
    result = run_job(StartupOperator(store, dry_run=dry_run).disable, entry)
    report_mutation(result, quiet=_is_quiet(ctx))


@app.command()
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Value name of the entry.")],
    location: LocationOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    dry_run: DryRunOption = False,
) -> None:
    """Delete a startup entry and its approval state."""
    store = get_store()
    config = get_config()
    entry = _find_entry(store, name, location)

    if not dry_run and not yes and not confirm_delete(f"{entry.name} ({entry.kind.label})"):
        print_warning("Aborted.")
        raise typer.Exit(code=0)

    backup_dir = config.effective_backup_dir if config.auto_backup_before_delete else None
    operator = StartupOperator(store, dry_run=dry_run, backup_dir=backup_dir)
    report_mutation(run_job(operator.delete, entry), quiet=_is_quiet(ctx))


@app.command()
def backup(
    destination: Annotated[Path, typer.Argument(help="Output .reg file.")],
) -> None:
    """Export all listed startup entries to a .reg file."""
    store = get_store()
    entries = _discover(store)

    result = run_job(StartupOperator(store).export, entries, destination)
    if not result.success:
        print_error(f"Failed to write backup: {result.error}")
        raise typer.Exit(code=1)
    print_success(f"Exported {len(entries)} entries to {result.path}")
