"""Context-menu scanner for shell verbs and COM handlers.

Walks the ``shell`` and ``shellex\\ContextMenuHandlers`` keys of the
file, directory, background and drive classes under both the classes
root (system-level) and the current user's ``Software\\Classes``
(user-level), emitting one raw candidate per registration found.
Candidates are merged into logical entries by the deduplicator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from regctl.context_menu.dedup import deduplicate
from regctl.context_menu.names import normalize_guid, resolve_display_name
from regctl.core.config import RegctlConfig
from regctl.core.filters import detect_system_directories, is_builtin_key, is_system_program
from regctl.core.publisher import CONTEXT_MENU_PUBLISHERS, guess_publisher
from regctl.core.resolver import Resolver
from regctl.models.context_menu import ContextMenuEntry, MenuContext, Visibility
from regctl.models.location import ContextMenuLocation
from regctl.store.base import (
    KeyNotFoundError,
    RegistryKey,
    RegistryStore,
    RootKey,
    StoreError,
    join_path,
)

logger = logging.getLogger(__name__)

# Presence of this value on an entry key disables it.
DISABLE_VALUE = "LegacyDisable"
EXTENDED_VALUE = "Extended"
HIDDEN_VALUE = "ProgrammaticAccessOnly"
MUI_VERB_VALUE = "MUIVerb"
COMMAND_SUBKEY = "command"

USER_CLASSES_PATH = r"Software\Classes"
CLSID_SERVER_PATH = r"CLSID\{clsid}\InprocServer32"


@dataclass(frozen=True, slots=True)
class ScanTarget:
    """A class path holding context-menu registrations.

    Attributes:
        context: Object context the registrations apply to.
        base_path: Path below the classes root (e.g., ``Directory\\shell``).
        is_com_handler: True for ``shellex\\ContextMenuHandlers`` paths.
    """

    context: MenuContext
    base_path: str
    is_com_handler: bool = False


CONTEXT_MENU_TARGETS: tuple[ScanTarget, ...] = (
    ScanTarget(MenuContext.FILE, r"*\shell"),
    ScanTarget(MenuContext.FILE, r"*\shellex\ContextMenuHandlers", is_com_handler=True),
    ScanTarget(MenuContext.DIRECTORY, r"Directory\shell"),
    ScanTarget(
        MenuContext.DIRECTORY, r"Directory\shellex\ContextMenuHandlers", is_com_handler=True
    ),
    ScanTarget(MenuContext.BACKGROUND, r"Directory\Background\shell"),
    ScanTarget(
        MenuContext.BACKGROUND,
        r"Directory\Background\shellex\ContextMenuHandlers",
        is_com_handler=True,
    ),
    ScanTarget(MenuContext.DRIVE, r"Drive\shell"),
    ScanTarget(MenuContext.DRIVE, r"Drive\shellex\ContextMenuHandlers", is_com_handler=True),
)


def root_paths_for(base_path: str) -> tuple[tuple[RootKey, str, bool], ...]:
    """Return the (root, path, is_system_level) pairs holding a class path.

    Args:
        base_path: Path below the classes root.

    Returns:
        The system-level classes root path and the user-level
        ``HKCU\\Software\\Classes`` path.
    """
    return (
        (RootKey.CLASSES_ROOT, base_path, True),
        (RootKey.CURRENT_USER, join_path(USER_CLASSES_PATH, base_path), False),
    )


class ContextMenuScanner:
    """Discovers context-menu entries in the registry.

    Store errors never abort a scan: a path or key that cannot be read is
    logged and skipped, and the best-effort result is returned.

    Example:
        >>> scanner = ContextMenuScanner(store, resolver)
        >>> for entry in scanner.discover():
        ...     print(entry.display_name, entry.contexts_display)
    """

    def __init__(
        self,
        store: RegistryStore,
        resolver: Resolver | None = None,
        *,
        include_system_items: bool = False,
        include_com_handlers: bool = False,
        extra_skip_keys: Iterable[str] = (),
        system_dirs: Sequence[str] | None = None,
        targets: Sequence[ScanTarget] = CONTEXT_MENU_TARGETS,
    ) -> None:
        """Initialize the scanner.

        Args:
            store: Registry store capability.
            resolver: Indirect resource string resolver, None to only clean up.
            include_system_items: Keep entries running programs from the
                Windows directories.
            include_com_handlers: Scan ``shellex`` COM handler registrations.
            extra_skip_keys: Additional key names to skip.
            system_dirs: Windows directories; detected at runtime if None.
            targets: Class paths to scan.
        """
        self._store = store
        self._resolver = resolver
        self._include_system_items = include_system_items
        self._include_com_handlers = include_com_handlers
        self._extra_skip_keys = tuple(extra_skip_keys)
        self._system_dirs = (
            tuple(system_dirs) if system_dirs is not None else detect_system_directories()
        )
        self._targets = tuple(targets)

    @classmethod
    def from_config(
        cls,
        store: RegistryStore,
        config: RegctlConfig,
        resolver: Resolver | None = None,
    ) -> ContextMenuScanner:
        """Create a scanner using the settings from a RegctlConfig."""
        return cls(
            store,
            resolver,
            include_system_items=config.include_system_items,
            include_com_handlers=config.include_com_handlers,
            extra_skip_keys=config.extra_skip_keys,
        )

    def discover(self) -> list[ContextMenuEntry]:
        """Scan all targets and merge duplicate registrations.

        Returns:
            Deduplicated entries sorted by context, then display name.
        """
        return deduplicate(self.scan())

    def scan(self) -> Iterator[ContextMenuEntry]:
        """Yield one raw candidate per registration found.

        Each candidate carries exactly one context and one location.
        """
        for target in self._targets:
            if target.is_com_handler and not self._include_com_handlers:
                continue
            for root, path, is_system_level in root_paths_for(target.base_path):
                yield from self._scan_path(target, root, path, is_system_level)

    def _scan_path(
        self,
        target: ScanTarget,
        root: RootKey,
        path: str,
        is_system_level: bool,
    ) -> list[ContextMenuEntry]:
        """Read every child key of one class path.

        Candidates are collected before returning so the parent handle is
        closed before the caller resumes.
        """
        candidates: list[ContextMenuEntry] = []
        try:
            parent = self._store.open_key(root, path)
        except KeyNotFoundError:
            return candidates
        except StoreError as e:
            logger.warning("Cannot open %s\\%s: %s", root.value, path, e)
            return candidates

        with parent:
            try:
                names = parent.subkey_names()
            except StoreError as e:
                logger.warning("Cannot enumerate %s\\%s: %s", root.value, path, e)
                return candidates

            for name in names:
                if is_builtin_key(name, self._extra_skip_keys):
                    continue
                location = ContextMenuLocation(
                    root=root,
                    sub_path=join_path(path, name),
                    is_system_level=is_system_level,
                    is_com_handler=target.is_com_handler,
                )
                try:
                    candidate = self._read_candidate(parent, name, target, location)
                except StoreError as e:
                    logger.debug("Skipping %s: %s", location.full_path, e)
                    continue
                if candidate is not None:
                    candidates.append(candidate)

        return candidates

    def _read_candidate(
        self,
        parent: RegistryKey,
        name: str,
        target: ScanTarget,
        location: ContextMenuLocation,
    ) -> ContextMenuEntry | None:
        """Build a candidate from one entry key, or None if it is not manageable."""
        key = parent.open_subkey(name)
        if key is None:
            return None

        with key:
            if target.is_com_handler:
                handler = self._read_handler(key, name, location)
                if handler is None:
                    return None
                display_name, command, location = handler
            else:
                verb = self._read_verb(key, name)
                if verb is None:
                    return None
                display_name, command = verb

            if not self._include_system_items and is_system_program(command, self._system_dirs):
                logger.debug("Skipping system program %s: %s", location.full_path, command)
                return None

            enabled = key.get_value(DISABLE_VALUE) is None
            visibility = self._read_visibility(key)

        return ContextMenuEntry(
            key=name,
            display_name=display_name,
            command=command,
            contexts=frozenset({target.context}),
            locations=[location],
            enabled=enabled,
            publisher=guess_publisher(command, CONTEXT_MENU_PUBLISHERS),
            visibility=visibility,
        )

    def _read_verb(self, key: RegistryKey, name: str) -> tuple[str, str] | None:
        """Read caption and command of a ``shell`` verb.

        Keys without a ``command`` subkey are submenus or organizational
        nodes and are discarded.
        """
        raw_name = _text(key, MUI_VERB_VALUE) or _text(key, "") or name
        command_key = key.open_subkey(COMMAND_SUBKEY)
        if command_key is None:
            return None
        with command_key:
            command = _text(command_key, "")
        if not command or not command.strip():
            return None
        return resolve_display_name(raw_name, name, self._resolver), command

    def _read_handler(
        self, key: RegistryKey, name: str, location: ContextMenuLocation
    ) -> tuple[str, str, ContextMenuLocation] | None:
        """Read the CLSID and server module of a ``shellex`` COM handler."""
        handler_id = normalize_guid(_text(key, "")) or normalize_guid(name)
        if handler_id is None:
            return None

        server = self._read_handler_server(handler_id)
        if not server:
            return None

        raw_name = name
        if normalize_guid(name) is not None:
            raw_name = self._read_handler_name(handler_id) or name

        location = ContextMenuLocation(
            root=location.root,
            sub_path=location.sub_path,
            is_system_level=location.is_system_level,
            is_com_handler=True,
            handler_id=handler_id,
        )
        return resolve_display_name(raw_name, name, self._resolver), server, location

    def _read_handler_server(self, handler_id: str) -> str | None:
        path = CLSID_SERVER_PATH.format(clsid=handler_id)
        try:
            with self._store.open_key(RootKey.CLASSES_ROOT, path) as server_key:
                return _text(server_key, "")
        except StoreError as e:
            logger.debug("No server registered for %s: %s", handler_id, e)
            return None

    def _read_handler_name(self, handler_id: str) -> str | None:
        try:
            with self._store.open_key(RootKey.CLASSES_ROOT, f"CLSID\\{handler_id}") as clsid_key:
                return _text(clsid_key, "")
        except StoreError:
            return None

    @staticmethod
    def _read_visibility(key: RegistryKey) -> Visibility:
        if key.get_value(HIDDEN_VALUE) is not None:
            return Visibility.HIDDEN
        if key.get_value(EXTENDED_VALUE) is not None:
            return Visibility.EXTENDED
        return Visibility.NORMAL


def _text(key: RegistryKey, name: str) -> str | None:
    """Read a string value, returning None if absent or not text."""
    value = key.get_value(name)
    if value is None:
        return None
    return value.text
