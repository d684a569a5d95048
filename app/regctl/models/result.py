"""Result models for mutation and backup operations.

A mutation touches every location of an entry independently. Instead of
folding the outcome into a single boolean, operators return a
MutationResult carrying one LocationResult per location so callers can
decide how strict the overall verdict should be.
"""

from dataclasses import dataclass, field
from enum import Enum


class Operation(str, Enum):
    """Lifecycle operation applied to an entry."""

    ENABLE = "enable"
    DISABLE = "disable"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class LocationResult:
    """Outcome of an operation on a single location.

    Attributes:
        location: Full registry path that was operated on.
        success: Whether the store accepted the change.
        error: Error message if the operation failed, None otherwise.
        skipped: True if the key did not exist, so there was nothing to change.
        dry_run: Whether this was a dry-run (no store write).
    """

    location: str
    success: bool
    error: str | None = None
    skipped: bool = False
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Aggregated outcome of an operation on one entry.

    ``success`` mirrors the long-standing behaviour of reporting success
    whenever no unrecoverable error escaped, even if individual locations
    failed. Use ``all_succeeded`` or ``failed`` for the strict view.

    Attributes:
        operation: Operation that was applied.
        entry_name: Display name of the entry.
        outcomes: One result per location touched, in processing order.
        error: Unrecoverable error message, None if processing completed.
        backup_path: Pre-delete backup file, None if no backup was taken.
    """

    operation: Operation
    entry_name: str
    outcomes: tuple[LocationResult, ...] = ()
    error: str | None = None
    backup_path: str | None = None

    @property
    def success(self) -> bool:
        """True unless an unrecoverable error aborted the operation."""
        return self.error is None

    @property
    def all_succeeded(self) -> bool:
        """True if no unrecoverable error occurred and every location succeeded."""
        return self.success and all(outcome.success for outcome in self.outcomes)

    @property
    def failed(self) -> list[LocationResult]:
        """Locations where the operation failed."""
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def succeeded(self) -> list[LocationResult]:
        """Locations where the operation was applied or was a no-op."""
        return [outcome for outcome in self.outcomes if outcome.success]


@dataclass(frozen=True, slots=True)
class BackupResult:
    """Outcome of exporting entries to a ``.reg`` file.

    Attributes:
        path: Destination file.
        success: False only if the destination could not be written.
        blocks_written: Number of key blocks exported.
        errors: Per-location read errors, also written as comments in the file.
        error: Destination error message if the export failed.
    """

    path: str
    success: bool
    blocks_written: int = 0
    errors: list[str] = field(default_factory=lambda: [])
    error: str | None = None
