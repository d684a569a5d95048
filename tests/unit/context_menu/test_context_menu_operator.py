"""Unit tests for ContextMenuOperator.

Tests enable, disable and delete across every location of an entry,
per-location failure isolation, dry-run mode, and pre-delete backups.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import FakeRegistryStore
from regctl.context_menu.operator import ContextMenuOperator
from regctl.context_menu.scanner import ContextMenuScanner
from regctl.models.context_menu import ContextMenuEntry, MenuContext
from regctl.models.location import ContextMenuLocation
from regctl.models.result import Operation
from regctl.store.base import RootKey, StoreError, ValueKind

HKCR = RootKey.CLASSES_ROOT
HKCU = RootKey.CURRENT_USER
SYSTEM_PATH = "*\\shell\\vscode"
USER_PATH = "Software\\Classes\\*\\shell\\vscode"
CODE = '"C:\\Apps\\Code.exe" "%1"'


@pytest.fixture
def entry(store: FakeRegistryStore) -> ContextMenuEntry:
    """An entry registered under both the classes root and the user's classes."""
    for root, path in ((HKCR, SYSTEM_PATH), (HKCU, USER_PATH)):
        store.put(root, path, "", "Open with Code")
        store.put(root, f"{path}\\command", "", CODE)
    return ContextMenuEntry(
        key="vscode",
        display_name="Open with Code",
        command=CODE,
        contexts=frozenset({MenuContext.FILE}),
        locations=[
            ContextMenuLocation(HKCR, SYSTEM_PATH, True),
            ContextMenuLocation(HKCU, USER_PATH, False),
        ],
    )


def _remove_user_key(store: FakeRegistryStore) -> None:
    with store.open_key(HKCU, "Software\\Classes\\*\\shell", writable=True) as shell:
        shell.delete_subkey_tree("vscode")


class TestDisable:
    """Tests for ContextMenuOperator.disable."""

    def test_writes_marker_at_every_location(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """LegacyDisable is written to every key."""
        result = ContextMenuOperator(store).disable(entry)

        assert result.operation is Operation.DISABLE
        assert result.all_succeeded is True
        assert len(result.outcomes) == 2
        assert entry.enabled is False
        for root, path in ((HKCR, SYSTEM_PATH), (HKCU, USER_PATH)):
            value = store.value(root, path, "LegacyDisable")
            assert value is not None
            assert value.kind is ValueKind.STRING
            assert value.data == ""

    def test_creates_missing_key(self, store: FakeRegistryStore, entry: ContextMenuEntry) -> None:
        """A key removed since discovery is recreated with the marker."""
        _remove_user_key(store)

        result = ContextMenuOperator(store).disable(entry)

        assert result.all_succeeded is True
        assert store.value(HKCU, USER_PATH, "LegacyDisable") is not None

    def test_permission_failure_on_one_location(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """A denied write on the classes root does not stop the user location."""
        store.deny_write(HKCR, SYSTEM_PATH)

        result = ContextMenuOperator(store).disable(entry)

        assert result.success is True
        assert result.all_succeeded is False
        assert [o.location for o in result.failed] == [f"HKEY_CLASSES_ROOT\\{SYSTEM_PATH}"]
        assert result.failed[0].error is not None
        assert store.value(HKCR, SYSTEM_PATH, "LegacyDisable") is None
        assert store.value(HKCU, USER_PATH, "LegacyDisable") is not None
        assert entry.enabled is False


class TestEnable:
    """Tests for ContextMenuOperator.enable."""

    def test_disable_then_enable_round_trip(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """Enabling after disabling removes every marker."""
        operator = ContextMenuOperator(store)
        operator.disable(entry)

        result = operator.enable(entry)

        assert result.all_succeeded is True
        assert entry.enabled is True
        assert store.value(HKCR, SYSTEM_PATH, "LegacyDisable") is None
        assert store.value(HKCU, USER_PATH, "LegacyDisable") is None
        assert store.value(HKCU, USER_PATH, "") is not None

    def test_enable_already_enabled_is_noop(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """Enabling an enabled entry skips every location."""
        result = ContextMenuOperator(store).enable(entry)

        assert result.all_succeeded is True
        assert all(outcome.skipped for outcome in result.outcomes)

    def test_enable_missing_key_skipped(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """A key removed since discovery is skipped, not recreated."""
        _remove_user_key(store)

        result = ContextMenuOperator(store).enable(entry)

        assert result.all_succeeded is True
        assert not store.has_key(HKCU, USER_PATH)


class TestDelete:
    """Tests for ContextMenuOperator.delete."""

    def test_removes_every_key_tree(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """The entry key and its command subkey are removed at every location."""
        result = ContextMenuOperator(store).delete(entry)

        assert result.all_succeeded is True
        assert not store.has_key(HKCR, SYSTEM_PATH)
        assert not store.has_key(HKCU, USER_PATH)
        assert store.has_key(HKCR, "*\\shell")

    def test_partial_failure_continues(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """A denied location does not prevent deleting the other one."""
        store.deny_write(HKCR, "*\\shell")

        result = ContextMenuOperator(store).delete(entry)

        assert result.success is True
        assert len(result.failed) == 1
        assert len(result.succeeded) == 1
        assert store.has_key(HKCR, SYSTEM_PATH)
        assert not store.has_key(HKCU, USER_PATH)

    def test_already_deleted_is_skipped(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """Deleting twice reports the second run as skipped."""
        operator = ContextMenuOperator(store)
        operator.delete(entry)

        result = operator.delete(entry)

        assert result.all_succeeded is True
        assert all(outcome.skipped for outcome in result.outcomes)

    def test_backup_before_delete(
        self, store: FakeRegistryStore, entry: ContextMenuEntry, tmp_path: Path
    ) -> None:
        """With a backup directory the entry is exported first."""
        result = ContextMenuOperator(store, backup_dir=tmp_path).delete(entry)

        assert result.backup_path is not None
        backup = Path(result.backup_path)
        assert backup.parent == tmp_path
        assert backup.name.startswith("context-menu_")
        assert backup.name.endswith("_Open_with_Code.reg")
        content = backup.read_text(encoding="utf-16")
        assert f"[HKEY_CLASSES_ROOT\\{SYSTEM_PATH}\\command]" in content
        assert not store.has_key(HKCU, USER_PATH)

    def test_failed_backup_does_not_block_delete(
        self, store: FakeRegistryStore, entry: ContextMenuEntry, tmp_path: Path
    ) -> None:
        """A backup that cannot be written is logged and deletion proceeds."""
        with patch(
            "regctl.core.operator.ensure_backup_dir",
            side_effect=RuntimeError("Cannot create backup directory"),
        ):
            result = ContextMenuOperator(store, backup_dir=tmp_path).delete(entry)

        assert result.backup_path is None
        assert result.all_succeeded is True
        assert not store.has_key(HKCR, SYSTEM_PATH)


class TestDryRun:
    """Tests for dry-run mode."""

    @pytest.mark.parametrize("operation", list(Operation))
    def test_no_store_writes(
        self, store: FakeRegistryStore, entry: ContextMenuEntry, operation: Operation
    ) -> None:
        """Dry-run reports every location without touching the store."""
        operator = ContextMenuOperator(store, dry_run=True)

        (result,) = operator.execute(operation, [entry])

        assert operator.dry_run is True
        assert all(outcome.dry_run for outcome in result.outcomes)
        assert len(result.outcomes) == 2
        assert entry.enabled is True
        assert store.has_key(HKCU, USER_PATH)
        assert store.value(HKCU, USER_PATH, "LegacyDisable") is None


class TestUnrecoverableErrors:
    """Tests for errors escaping per-location handling."""

    def test_rolls_back_enabled_flag(
        self, store: FakeRegistryStore, entry: ContextMenuEntry
    ) -> None:
        """An unexpected failure restores the previous enabled flag."""
        operator = ContextMenuOperator(store)

        with patch.object(
            ContextMenuOperator, "_disable_locations", side_effect=StoreError("registry gone")
        ):
            result = operator.disable(entry)

        assert result.success is False
        assert result.error == "registry gone"
        assert entry.enabled is True


def test_execute_applies_to_each_entry(
    store: FakeRegistryStore, entry: ContextMenuEntry
) -> None:
    """execute returns one result per entry in order."""
    results = ContextMenuOperator(store).execute(Operation.DISABLE, [entry, entry])

    assert [r.entry_name for r in results] == ["Open with Code", "Open with Code"]
    assert store.open_handles == 0


def test_rediscovered_state_follows_mutations(
    store: FakeRegistryStore, entry: ContextMenuEntry, system_dirs: tuple[str, ...]
) -> None:
    """A fresh scan reports the state written by disable and enable."""
    scanner = ContextMenuScanner(store, system_dirs=system_dirs)
    operator = ContextMenuOperator(store)
    [found] = scanner.discover()
    assert found.enabled is True
    assert len(found.locations) == 2

    operator.disable(found)
    [disabled] = scanner.discover()

    assert disabled.key == "vscode"
    assert disabled.enabled is False

    operator.enable(disabled)
    [enabled] = scanner.discover()

    assert enabled.enabled is True
    assert len(enabled.locations) == 2
