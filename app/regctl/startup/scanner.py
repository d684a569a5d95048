"""Startup scanner for Run and RunOnce registrations.

Reads the string values of the per-user and per-machine Run and RunOnce
keys. Each value is one entry; entries are never merged across keys.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from regctl.core.config import RegctlConfig
from regctl.core.filters import STARTUP_SYSTEM_MARKERS, detect_system_directories, is_system_program
from regctl.core.publisher import STARTUP_PUBLISHERS, guess_publisher
from regctl.models.location import StartupLocation, StartupLocationKind
from regctl.models.startup import StartupEntry
from regctl.startup.approval import is_startup_enabled
from regctl.store.base import KeyNotFoundError, RegistryStore, StoreError

logger = logging.getLogger(__name__)

STARTUP_KINDS: tuple[StartupLocationKind, ...] = (
    StartupLocationKind.USER_RUN,
    StartupLocationKind.SYSTEM_RUN,
    StartupLocationKind.USER_RUN_ONCE,
    StartupLocationKind.SYSTEM_RUN_ONCE,
)


class StartupScanner:
    """Discovers startup entries in the registry.

    Like the context-menu scanner, a Run key that cannot be read is
    logged and skipped without failing the scan.

    Example:
        >>> scanner = StartupScanner(store)
        >>> for entry in scanner.discover():
        ...     print(entry.name, entry.kind.label, entry.enabled)
    """

    def __init__(
        self,
        store: RegistryStore,
        *,
        include_system_items: bool = False,
        system_dirs: Sequence[str] | None = None,
        kinds: Sequence[StartupLocationKind] = STARTUP_KINDS,
    ) -> None:
        self._store = store
        self._include_system_items = include_system_items
        self._system_dirs = (
            tuple(system_dirs) if system_dirs is not None else detect_system_directories()
        )
        self._kinds = tuple(kinds)

    @classmethod
    def from_config(cls, store: RegistryStore, config: RegctlConfig) -> StartupScanner:
        """Create a scanner using the settings from a RegctlConfig."""
        return cls(store, include_system_items=config.include_system_items)

    def discover(self) -> list[StartupEntry]:
        """Scan every Run/RunOnce location.

        Returns:
            Entries sorted by name (case-insensitive), then location kind.
        """
        entries: list[StartupEntry] = []
        for kind in self._kinds:
            entries.extend(self._scan_location(StartupLocation(kind)))

        order = {kind: index for index, kind in enumerate(STARTUP_KINDS)}
        entries.sort(key=lambda e: (e.name.casefold(), order.get(e.kind, len(order))))
        return entries

    def _scan_location(self, location: StartupLocation) -> list[StartupEntry]:
        entries: list[StartupEntry] = []
        try:
            key = self._store.open_key(location.root, location.run_path)
        except KeyNotFoundError:
            return entries
        except StoreError as e:
            logger.warning("Cannot open %s: %s", location.registry_path, e)
            return entries

        with key:
            try:
                names = key.value_names()
            except StoreError as e:
                logger.warning("Cannot enumerate %s: %s", location.registry_path, e)
                return entries

            for name in names:
                if not name:
                    continue
                try:
                    value = key.get_value(name)
                except StoreError as e:
                    logger.debug("Skipping %s\\%s: %s", location.registry_path, name, e)
                    continue
                command = value.text if value is not None else None
                if not command or not command.strip():
                    continue
                if not self._include_system_items and is_system_program(
                    command, self._system_dirs, STARTUP_SYSTEM_MARKERS
                ):
                    logger.debug("Skipping system program %s: %s", name, command)
                    continue

                entries.append(
                    StartupEntry(
                        name=name,
                        command=command,
                        location=location,
                        enabled=is_startup_enabled(self._store, location, name),
                        publisher=guess_publisher(command, STARTUP_PUBLISHERS),
                    )
                )

        return entries
