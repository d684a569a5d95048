"""Startup operator for enabling, disabling and deleting entries.

Enabling and disabling only touch the StartupApproved value named after
the entry, the same way Task Manager does; the Run value is left alone.
Deleting removes both the Run value and its approval value.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from regctl.backup.writer import export_startup
from regctl.core.operator import Operator, guarded
from regctl.models.result import BackupResult, LocationResult, Operation
from regctl.models.startup import StartupEntry
from regctl.startup.approval import disabled_sentinel
from regctl.store.base import RegistryStore, RegistryValue, RootKey, ValueKind

logger = logging.getLogger(__name__)


class StartupOperator(Operator[StartupEntry]):
    """Operator for startup entries."""

    backup_prefix = "startup"

    def __init__(
        self,
        store: RegistryStore,
        *,
        dry_run: bool = False,
        backup_dir: Path | None = None,
    ) -> None:
        super().__init__(store, dry_run=dry_run, backup_dir=backup_dir)

    def entry_name(self, entry: StartupEntry) -> str:
        return entry.name

    def get_enabled(self, entry: StartupEntry) -> bool:
        return entry.enabled

    def set_enabled(self, entry: StartupEntry, enabled: bool) -> None:
        entry.enabled = enabled

    def export(self, entries: Sequence[StartupEntry], destination: Path) -> BackupResult:
        """Export entries to a ``.reg`` file grouped by Run path."""
        return export_startup(entries, destination)

    def _dry_run_locations(self, operation: Operation, entry: StartupEntry) -> list[str]:
        if operation is Operation.DELETE:
            return [entry.registry_path, entry.location.approved_registry_path]
        return [entry.location.approved_registry_path]

    def _enable_locations(self, entry: StartupEntry) -> list[LocationResult]:
        location = entry.location
        return [
            guarded(
                location.approved_registry_path,
                "enable",
                lambda: self._delete_value(location.root, location.approved_path, entry.name),
            )
        ]

    def _disable_locations(self, entry: StartupEntry) -> list[LocationResult]:
        location = entry.location
        return [
            guarded(
                location.approved_registry_path,
                "disable",
                lambda: self._write_sentinel(location.root, location.approved_path, entry.name),
            )
        ]

    def _delete_locations(self, entry: StartupEntry) -> list[LocationResult]:
        location = entry.location
        return [
            guarded(
                location.registry_path,
                "delete",
                lambda: self._delete_value(location.root, location.run_path, entry.name),
            ),
            guarded(
                location.approved_registry_path,
                "delete",
                lambda: self._delete_value(location.root, location.approved_path, entry.name),
            ),
        ]

    def _delete_value(self, root: RootKey, path: str, name: str) -> bool:
        """Delete a value. A missing key or value is a no-op."""
        key = self._store.try_open_key(root, path, writable=True)
        if key is None:
            return False
        with key:
            return key.delete_value(name)

    def _write_sentinel(self, root: RootKey, path: str, name: str) -> bool:
        with self._store.create_key(root, path) as key:
            key.set_value(RegistryValue(name, ValueKind.BINARY, disabled_sentinel()))
        return True
