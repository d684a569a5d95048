"""Unit tests for StartupOperator."""

from pathlib import Path

import pytest
from conftest import FakeRegistryStore
from regctl.models.location import (
    APPROVED_RUN32_PATH,
    APPROVED_RUN_PATH,
    RUN_PATH,
    StartupLocation,
)
from regctl.models.location import StartupLocationKind as Kind
from regctl.models.result import Operation
from regctl.models.startup import StartupEntry
from regctl.startup.approval import disabled_sentinel, is_startup_enabled
from regctl.startup.operator import StartupOperator
from regctl.startup.scanner import StartupScanner
from regctl.store.base import RootKey, ValueKind

HKCU = RootKey.CURRENT_USER
HKLM = RootKey.LOCAL_MACHINE
SPOTIFY = '"C:\\Users\\me\\Spotify.exe" /minimized'


@pytest.fixture
def entry(store: FakeRegistryStore) -> StartupEntry:
    store.put(HKCU, RUN_PATH, "Spotify", SPOTIFY)
    return StartupEntry(name="Spotify", command=SPOTIFY, location=StartupLocation(Kind.USER_RUN))


class TestEnableDisable:
    """Tests for StartupOperator.enable and disable."""

    def test_disable_writes_sentinel(self, store: FakeRegistryStore, entry: StartupEntry) -> None:
        """Disabling writes the binary sentinel and leaves the Run value alone."""
        result = StartupOperator(store).disable(entry)

        assert result.all_succeeded is True
        assert [o.location for o in result.outcomes] == [f"HKEY_CURRENT_USER\\{APPROVED_RUN_PATH}"]
        value = store.value(HKCU, APPROVED_RUN_PATH, "Spotify")
        assert value is not None
        assert value.kind is ValueKind.BINARY
        assert value.data == disabled_sentinel()
        assert store.value(HKCU, RUN_PATH, "Spotify") is not None
        assert entry.enabled is False

    def test_round_trip(self, store: FakeRegistryStore, entry: StartupEntry) -> None:
        """The resolved state follows disable and enable."""
        operator = StartupOperator(store)

        operator.disable(entry)
        assert is_startup_enabled(store, entry.location, "Spotify") is False

        result = operator.enable(entry)
        assert result.all_succeeded is True
        assert entry.enabled is True
        assert is_startup_enabled(store, entry.location, "Spotify") is True
        assert store.value(HKCU, APPROVED_RUN_PATH, "Spotify") is None

    def test_rediscovered_state_follows_mutations(
        self, store: FakeRegistryStore, entry: StartupEntry, system_dirs: tuple[str, ...]
    ) -> None:
        """A fresh scan reports the state written by disable and enable."""
        scanner = StartupScanner(store, system_dirs=system_dirs)
        operator = StartupOperator(store)
        [found] = scanner.discover()
        assert found.enabled is True

        operator.disable(found)
        [disabled] = scanner.discover()

        assert disabled.name == "Spotify"
        assert disabled.enabled is False

        operator.enable(disabled)
        [enabled] = scanner.discover()

        assert enabled.enabled is True

    def test_enable_without_approval_key(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """Enabling an entry Task Manager never touched is a no-op."""
        result = StartupOperator(store).enable(entry)

        assert result.all_succeeded is True
        assert result.outcomes[0].skipped is True
        assert not store.has_key(HKCU, APPROVED_RUN_PATH)

    def test_system_entry_uses_run32(self, store: FakeRegistryStore) -> None:
        """Machine-wide entries are disabled under StartupApproved\\Run32."""
        store.put(HKLM, RUN_PATH, "Updater", "C:\\Vendor\\updater.exe")
        entry = StartupEntry(
            name="Updater",
            command="C:\\Vendor\\updater.exe",
            location=StartupLocation(Kind.SYSTEM_RUN),
        )

        StartupOperator(store).disable(entry)

        assert store.value(HKLM, APPROVED_RUN32_PATH, "Updater") is not None

    def test_denied_write_reported(self, store: FakeRegistryStore, entry: StartupEntry) -> None:
        """A denied approval key is reported as a failed location."""
        store.deny_write(HKCU, APPROVED_RUN_PATH)

        result = StartupOperator(store).disable(entry)

        assert result.success is True
        assert result.all_succeeded is False
        assert result.failed[0].error is not None
        assert store.value(HKCU, APPROVED_RUN_PATH, "Spotify") is None


class TestDelete:
    """Tests for StartupOperator.delete."""

    def test_removes_run_and_approval_values(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """Both the Run value and its approval value are removed."""
        store.put(HKCU, RUN_PATH, "Other", "C:\\other.exe")
        store.put(HKCU, APPROVED_RUN_PATH, "Spotify", disabled_sentinel(), ValueKind.BINARY)

        result = StartupOperator(store).delete(entry)

        assert result.all_succeeded is True
        assert len(result.outcomes) == 2
        assert store.value(HKCU, RUN_PATH, "Spotify") is None
        assert store.value(HKCU, APPROVED_RUN_PATH, "Spotify") is None
        assert store.value(HKCU, RUN_PATH, "Other") is not None

    def test_missing_approval_key_is_skipped(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """No approval key leaves the second outcome as a skipped success."""
        result = StartupOperator(store).delete(entry)

        assert [o.skipped for o in result.outcomes] == [False, True]
        assert result.all_succeeded is True

    def test_run_key_denied_approval_still_removed(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """A denied Run key does not stop the approval value from being removed."""
        store.put(HKCU, APPROVED_RUN_PATH, "Spotify", disabled_sentinel(), ValueKind.BINARY)
        store.deny_write(HKCU, RUN_PATH)

        result = StartupOperator(store).delete(entry)

        assert result.success is True
        assert [o.success for o in result.outcomes] == [False, True]
        assert store.value(HKCU, RUN_PATH, "Spotify") is not None
        assert store.value(HKCU, APPROVED_RUN_PATH, "Spotify") is None

    def test_backup_before_delete(
        self, store: FakeRegistryStore, entry: StartupEntry, tmp_path: Path
    ) -> None:
        """The entry is exported to the backup directory before deletion."""
        result = StartupOperator(store, backup_dir=tmp_path).delete(entry)

        assert result.backup_path is not None
        backup = Path(result.backup_path)
        assert backup.name.startswith("startup_")
        content = backup.read_text(encoding="utf-16")
        assert f"[HKEY_CURRENT_USER\\{RUN_PATH}]" in content
        assert '"Spotify"="\\"C:\\\\Users\\\\me\\\\Spotify.exe\\" /minimized"' in content


class TestDryRun:
    """Tests for dry-run mode."""

    def test_disable_reports_approval_path(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """Dry-run disable lists only the approval path and writes nothing."""
        operator = StartupOperator(store, dry_run=True)

        results = operator.execute(Operation.DISABLE, [entry])

        assert [o.location for o in results[0].outcomes] == [
            f"HKEY_CURRENT_USER\\{APPROVED_RUN_PATH}",
        ]
        assert all(o.dry_run for o in results[0].outcomes)
        assert entry.enabled is True
        assert not store.has_key(HKCU, APPROVED_RUN_PATH)
        assert store.open_handles == 0

    def test_enable_reports_approval_path(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """Dry-run enable does not list the Run key."""
        result = StartupOperator(store, dry_run=True).enable(entry)

        assert [o.location for o in result.outcomes] == [
            f"HKEY_CURRENT_USER\\{APPROVED_RUN_PATH}",
        ]

    def test_delete_reports_both_paths(
        self, store: FakeRegistryStore, entry: StartupEntry
    ) -> None:
        """Dry-run delete lists the Run and approval paths and keeps the value."""
        result = StartupOperator(store, dry_run=True).delete(entry)

        assert [o.location for o in result.outcomes] == [
            f"HKEY_CURRENT_USER\\{RUN_PATH}",
            f"HKEY_CURRENT_USER\\{APPROVED_RUN_PATH}",
        ]
        assert store.value(HKCU, RUN_PATH, "Spotify") is not None
