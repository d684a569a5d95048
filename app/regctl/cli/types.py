"""Shared types and utilities for CLI commands.

This module provides the output format option and the helpers used by
both the ``menu`` and ``startup`` commands to reach the registry and
the user configuration, and to run store jobs on the background worker.
"""

import json
from collections.abc import Callable, Sequence
from enum import Enum
from functools import cache
from typing import Any, TypeVar

import typer

from regctl.core.config import ConfigError, RegctlConfig, load_config_or_default
from regctl.core.worker import BackgroundWorker
from regctl.models.result import MutationResult
from regctl.store import RegistryStore, get_default_store
from regctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_mutation_result,
    print_success,
)


T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_store() -> RegistryStore:
    """Open the live registry store, exiting with code 1 where there is none."""
    try:
        return get_default_store()
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_config() -> RegctlConfig:
    """Load the user configuration, exiting with code 1 if it is invalid."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@cache
def get_worker() -> BackgroundWorker:
    """Return the worker shared by all commands of this process."""
    return BackgroundWorker()


def run_job(job: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a discovery, mutation or backup job on the worker and wait for its result.

    Exceptions raised by the job propagate to the caller.
    """
    return get_worker().submit(job, *args, **kwargs).result()


def print_json(records: Sequence[dict[str, Any]]) -> None:
    """Print records as an indented JSON array."""
    console.print_json(json.dumps(list(records)))


def report_mutation(result: MutationResult, quiet: bool = False) -> None:
    """Print the outcome of an operation and exit non-zero on any failure.

    Raises:
        typer.Exit: With code 1 if the operation aborted or a location failed.
    """
    if not quiet or not result.all_succeeded:
        print_mutation_result(result)

    if not result.success:
        print_error(f"Failed to {result.operation.value} {result.entry_name}: {result.error}")
        raise typer.Exit(code=1)
    if result.failed:
        print_error(
            f"{result.operation.value.capitalize()} {result.entry_name}: "
            f"{len(result.failed)} of {len(result.outcomes)} locations failed"
        )
        raise typer.Exit(code=1)

    if any(outcome.dry_run for outcome in result.outcomes):
        if not quiet:
            print_info("Dry-run: no changes were made.")
        return
    if result.backup_path and not quiet:
        console.print(f"[muted]Backup written to {result.backup_path}[/]")
    if not quiet:
        print_success(f"{result.operation.value.capitalize()}d {result.entry_name}")


def confirm_delete(description: str) -> bool:
    """Prompt the user to confirm a deletion.

    Returns:
        True if user confirms, False otherwise.
    """
    return typer.confirm(f"Delete {description}?", default=False)
