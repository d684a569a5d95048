"""Context-menu operator for enabling, disabling and deleting entries.

An entry is disabled by writing an empty ``LegacyDisable`` string value
on each of its keys, which Explorer honours for both verbs and COM
handler registrations. Deleting removes every key tree backing the entry.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from regctl.backup.writer import export_context_menu
from regctl.context_menu.scanner import DISABLE_VALUE
from regctl.core.operator import Operator, guarded
from regctl.models.context_menu import ContextMenuEntry
from regctl.models.location import ContextMenuLocation
from regctl.models.result import BackupResult, LocationResult, Operation
from regctl.store.base import RegistryStore, RegistryValue, ValueKind

logger = logging.getLogger(__name__)


class ContextMenuOperator(Operator[ContextMenuEntry]):
    """Operator for context-menu entries.

    Every location of the entry is processed independently; a denied
    write on the machine-wide classes root does not stop the per-user
    registration from being updated.

    Example:
        >>> operator = ContextMenuOperator(store, backup_dir=Path("backups"))
        >>> result = operator.delete(entry)
        >>> result.backup_path
        'backups/context-menu_20250101T000000Z_Open_with_Code.reg'
    """

    backup_prefix = "context-menu"

    def __init__(
        self,
        store: RegistryStore,
        *,
        dry_run: bool = False,
        backup_dir: Path | None = None,
    ) -> None:
        super().__init__(store, dry_run=dry_run, backup_dir=backup_dir)

    def entry_name(self, entry: ContextMenuEntry) -> str:
        return entry.display_name

    def get_enabled(self, entry: ContextMenuEntry) -> bool:
        return entry.enabled

    def set_enabled(self, entry: ContextMenuEntry, enabled: bool) -> None:
        entry.enabled = enabled

    def export(self, entries: Sequence[ContextMenuEntry], destination: Path) -> BackupResult:
        """Export entries and their full key trees to a ``.reg`` file."""
        return export_context_menu(self._store, entries, destination)

    def _dry_run_locations(self, operation: Operation, entry: ContextMenuEntry) -> list[str]:
        return [location.full_path for location in entry.locations]

    def _enable_locations(self, entry: ContextMenuEntry) -> list[LocationResult]:
        return [
            guarded(location.full_path, "enable", lambda loc=location: self._enable_one(loc))
            for location in entry.locations
        ]

    def _disable_locations(self, entry: ContextMenuEntry) -> list[LocationResult]:
        return [
            guarded(location.full_path, "disable", lambda loc=location: self._disable_one(loc))
            for location in entry.locations
        ]

    def _delete_locations(self, entry: ContextMenuEntry) -> list[LocationResult]:
        return [
            guarded(location.full_path, "delete", lambda loc=location: self._delete_one(loc))
            for location in entry.locations
        ]

    def _enable_one(self, location: ContextMenuLocation) -> bool:
        """Remove the disable marker. A missing key or marker is a no-op."""
        key = self._store.try_open_key(location.root, location.sub_path, writable=True)
        if key is None:
            logger.debug("Key %s no longer exists", location.full_path)
            return False
        with key:
            return key.delete_value(DISABLE_VALUE)

    def _disable_one(self, location: ContextMenuLocation) -> bool:
        """Write the disable marker, creating the key if it is missing."""
        with self._store.create_key(location.root, location.sub_path) as key:
            key.set_value(RegistryValue(DISABLE_VALUE, ValueKind.STRING, ""))
        return True

    def _delete_one(self, location: ContextMenuLocation) -> bool:
        """Remove the entry key and everything below it."""
        parent = self._store.try_open_key(location.root, location.parent_path, writable=True)
        if parent is None:
            logger.debug("Parent of %s no longer exists", location.full_path)
            return False
        with parent:
            return parent.delete_subkey_tree(location.key_name)
