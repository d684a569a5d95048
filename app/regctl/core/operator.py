"""Abstract base class for entry operators.

This module defines the Operator interface shared by the context-menu
and startup operators, and the per-location error isolation both use.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Generic, TypeVar

from regctl.core.paths import ensure_backup_dir
from regctl.models.result import BackupResult, LocationResult, MutationResult, Operation
from regctl.store.base import RegistryStore, StoreError

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT")

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


def guarded(location: str, description: str, action: Callable[[], bool]) -> LocationResult:
    """Run a store action for one location, isolating failures.

    Args:
        location: Full registry path the action touches.
        description: Short verb for log messages (e.g., "enable").
        action: Callable returning True if it changed something and
            False if there was nothing to change.

    Returns:
        LocationResult; store errors are logged and reported, never raised.
    """
    try:
        changed = action()
    except StoreError as e:
        logger.warning("Cannot %s %s: %s", description, location, e)
        return LocationResult(location=location, success=False, error=str(e))
    return LocationResult(location=location, success=True, skipped=not changed)


class Operator(ABC, Generic[EntryT]):
    """Abstract base class for entry operators.

    Operators apply enable, disable and delete to every location backing
    an entry. A failure on one location is recorded in the returned
    MutationResult and processing continues with the next one.

    Attributes:
        dry_run: If True, only report what would be changed.

    Example:
        >>> operator = ContextMenuOperator(store)
        >>> result = operator.disable(entry)
        >>> for outcome in result.failed:
        ...     print(outcome.location, outcome.error)
    """

    backup_prefix = "regctl"

    def __init__(
        self,
        store: RegistryStore,
        *,
        dry_run: bool = False,
        backup_dir: Path | None = None,
    ) -> None:
        """Initialize the operator.

        Args:
            store: Registry store capability.
            dry_run: If True, simulate operations without writing to the store.
            backup_dir: If set, entries are exported to a ``.reg`` file in
                this directory before they are deleted.
        """
        self._store = store
        self._dry_run = dry_run
        self._backup_dir = backup_dir

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @abstractmethod
    def entry_name(self, entry: EntryT) -> str:
        """Return the display name of an entry for results and logs."""

    @abstractmethod
    def set_enabled(self, entry: EntryT, enabled: bool) -> None:
        """Update the in-memory enabled flag of an entry."""

    @abstractmethod
    def get_enabled(self, entry: EntryT) -> bool:
        """Return the in-memory enabled flag of an entry."""

    @abstractmethod
    def _enable_locations(self, entry: EntryT) -> list[LocationResult]:
        """Clear the disabled state at every location of the entry."""

    @abstractmethod
    def _disable_locations(self, entry: EntryT) -> list[LocationResult]:
        """Set the disabled state at every location of the entry."""

    @abstractmethod
    def _delete_locations(self, entry: EntryT) -> list[LocationResult]:
        """Remove the entry from every location."""

    @abstractmethod
    def _dry_run_locations(self, operation: Operation, entry: EntryT) -> list[str]:
        """Return the paths an operation would touch."""

    @abstractmethod
    def export(self, entries: Sequence[EntryT], destination: Path) -> BackupResult:
        """Export entries to a ``.reg`` file."""

    def enable(self, entry: EntryT) -> MutationResult:
        """Enable an entry at every location.

        The entry's ``enabled`` flag is set to True unless an
        unrecoverable error occurs.
        """
        return self._apply(Operation.ENABLE, entry, self._enable_locations, enabled=True)

    def disable(self, entry: EntryT) -> MutationResult:
        """Disable an entry at every location.

        The entry's ``enabled`` flag is set to False unless an
        unrecoverable error occurs.
        """
        return self._apply(Operation.DISABLE, entry, self._disable_locations, enabled=False)

    def delete(self, entry: EntryT) -> MutationResult:
        """Delete an entry from every location.

        If a backup directory is configured, the entry is exported first.
        A failed pre-delete backup is logged and does not block deletion.
        """
        backup_path = None
        if self._backup_dir is not None and not self._dry_run:
            backup_path = self._backup_before_delete(entry, self._backup_dir)

        result = self._apply(Operation.DELETE, entry, self._delete_locations, enabled=None)
        if backup_path is None:
            return result
        return MutationResult(
            operation=result.operation,
            entry_name=result.entry_name,
            outcomes=result.outcomes,
            error=result.error,
            backup_path=backup_path,
        )

    def execute(self, operation: Operation, entries: Sequence[EntryT]) -> list[MutationResult]:
        """Apply one operation to several entries.

        Args:
            operation: Operation to apply.
            entries: Entries to operate on.

        Returns:
            One MutationResult per entry, in input order.
        """
        dispatch = {
            Operation.ENABLE: self.enable,
            Operation.DISABLE: self.disable,
            Operation.DELETE: self.delete,
        }
        return [dispatch[operation](entry) for entry in entries]

    def _apply(
        self,
        operation: Operation,
        entry: EntryT,
        locations: Callable[[EntryT], list[LocationResult]],
        *,
        enabled: bool | None,
    ) -> MutationResult:
        """Run an operation, updating the enabled flag optimistically.

        Per-location store errors are reported in the outcomes. Any other
        store error rolls the flag back and is reported as the result error.
        """
        name = self.entry_name(entry)

        if self._dry_run:
            logger.info("Dry-run: would %s %s", operation.value, name)
            outcomes = tuple(
                LocationResult(location=path, success=True, dry_run=True)
                for path in self._dry_run_locations(operation, entry)
            )
            return MutationResult(operation=operation, entry_name=name, outcomes=outcomes)

        previous = self.get_enabled(entry)
        if enabled is not None:
            self.set_enabled(entry, enabled)

        try:
            outcomes = tuple(locations(entry))
        except (StoreError, OSError) as e:
            self.set_enabled(entry, previous)
            logger.error("Failed to %s %s: %s", operation.value, name, e)
            return MutationResult(operation=operation, entry_name=name, error=str(e))

        failed = sum(1 for outcome in outcomes if not outcome.success)
        if failed:
            logger.warning(
                "%s %s: %d of %d locations failed",
                operation.value.capitalize(),
                name,
                failed,
                len(outcomes),
            )
        else:
            logger.info("%s %s", operation.value.capitalize(), name)

        return MutationResult(operation=operation, entry_name=name, outcomes=outcomes)

    def _backup_before_delete(self, entry: EntryT, backup_dir: Path) -> str | None:
        """Export an entry to a timestamped file in the backup directory.

        Returns:
            Path of the backup file, or None if the backup failed.
        """
        try:
            directory = ensure_backup_dir(backup_dir)
        except RuntimeError as e:
            logger.warning("Pre-delete backup skipped: %s", e)
            return None

        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
        safe_name = _UNSAFE_FILENAME.sub("_", self.entry_name(entry)).strip("_") or "entry"
        destination = directory / f"{self.backup_prefix}_{timestamp}_{safe_name}.reg"

        result = self.export([entry], destination)
        if not result.success:
            logger.warning(
                "Pre-delete backup of %s failed: %s", self.entry_name(entry), result.error
            )
            return None
        return result.path
