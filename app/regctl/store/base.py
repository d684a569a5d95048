"""Abstract registry store capability.

This module defines the interface the discovery, mutation and backup
code uses to talk to the registry. The live implementation wraps
``winreg``; tests provide an in-memory store with the same shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any


class RootKey(str, Enum):
    """Top-level registry roots used by regctl.

    The value is the canonical textual form written to ``.reg`` files.

    Attributes:
        CLASSES_ROOT: Merged per-user and per-machine class registrations.
        CURRENT_USER: Settings of the logged-on user.
        LOCAL_MACHINE: Machine-wide settings.
    """

    CLASSES_ROOT = "HKEY_CLASSES_ROOT"
    CURRENT_USER = "HKEY_CURRENT_USER"
    LOCAL_MACHINE = "HKEY_LOCAL_MACHINE"

    @classmethod
    def from_name(cls, name: str) -> RootKey:
        """Parse a root name, accepting the short ``HKCR``/``HKCU``/``HKLM`` forms.

        Args:
            name: Root name in long or short form (case-insensitive).

        Returns:
            Matching RootKey.

        Raises:
            ValueError: If the name does not identify a known root.
        """
        upper = name.strip().upper()
        for root in cls:
            if upper in (root.value, _SHORT_NAMES[root]):
                return root
        msg = f"Unknown registry root: {name}"
        raise ValueError(msg)


_SHORT_NAMES: dict[RootKey, str] = {
    RootKey.CLASSES_ROOT: "HKCR",
    RootKey.CURRENT_USER: "HKCU",
    RootKey.LOCAL_MACHINE: "HKLM",
}


class ValueKind(str, Enum):
    """Registry value types handled by regctl.

    Attributes:
        STRING: ``REG_SZ`` text.
        EXPAND_STRING: ``REG_EXPAND_SZ`` text with unexpanded ``%VAR%`` references.
        MULTI_STRING: ``REG_MULTI_SZ`` list of strings.
        BINARY: ``REG_BINARY`` raw bytes.
        DWORD: ``REG_DWORD`` 32-bit integer.
        QWORD: ``REG_QWORD`` 64-bit integer.
        OTHER: Any other type; carried through but not exported.
    """

    STRING = "string"
    EXPAND_STRING = "expand_string"
    MULTI_STRING = "multi_string"
    BINARY = "binary"
    DWORD = "dword"
    QWORD = "qword"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class RegistryValue:
    """A single named value read from or written to a key.

    Attributes:
        name: Value name. The empty string is the key's default value.
        kind: Registry value type.
        data: Python representation (str, list[str], bytes, int, or None).
    """

    name: str
    kind: ValueKind
    data: Any

    @property
    def text(self) -> str | None:
        """Return the data as text for string kinds, None otherwise."""
        if self.kind in (ValueKind.STRING, ValueKind.EXPAND_STRING) and isinstance(
            self.data, str
        ):
            return self.data
        return None


class StoreError(Exception):
    """Base exception for registry store access errors."""


class KeyNotFoundError(StoreError):
    """Raised when a key cannot be found."""


class StorePermissionError(StoreError):
    """Raised when access to a key or value is denied."""


class RegistryKey(ABC):
    """An open registry key handle.

    Handles are context managers and must be closed on every exit path.

    Example:
        >>> with store.open_key(RootKey.CURRENT_USER, r"Software\\Classes") as key:
        ...     for name in key.subkey_names():
        ...         print(name)
    """

    @abstractmethod
    def subkey_names(self) -> list[str]:
        """Return the names of the direct child keys."""

    @abstractmethod
    def value_names(self) -> list[str]:
        """Return the names of the values stored on this key."""

    @abstractmethod
    def get_value(self, name: str) -> RegistryValue | None:
        """Read a value by name.

        Args:
            name: Value name ("" for the default value).

        Returns:
            The value, or None if it does not exist.

        Raises:
            StoreError: If the value exists but cannot be read.
        """

    @abstractmethod
    def set_value(self, value: RegistryValue) -> None:
        """Create or overwrite a value.

        Raises:
            StorePermissionError: If the key was not opened writable.
        """

    @abstractmethod
    def delete_value(self, name: str) -> bool:
        """Delete a value. A missing value is not an error.

        Returns:
            True if a value was deleted, False if it did not exist.
        """

    @abstractmethod
    def delete_subkey_tree(self, name: str) -> bool:
        """Recursively delete a child key. A missing child is not an error.

        Returns:
            True if a subtree was deleted, False if it did not exist.
        """

    @abstractmethod
    def open_subkey(self, name: str, *, writable: bool = False) -> RegistryKey | None:
        """Open a child key.

        Returns:
            The open child handle, or None if the child does not exist.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the handle."""

    def __enter__(self) -> RegistryKey:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class RegistryStore(ABC):
    """Capability to open keys under the registry roots."""

    @abstractmethod
    def open_key(self, root: RootKey, path: str, *, writable: bool = False) -> RegistryKey:
        """Open an existing key.

        Args:
            root: Registry root.
            path: Sub-path below the root, backslash separated.
            writable: Request write access.

        Returns:
            Open key handle.

        Raises:
            KeyNotFoundError: If the key does not exist.
            StorePermissionError: If the requested access is denied.
            StoreError: For any other access failure.
        """

    @abstractmethod
    def create_key(self, root: RootKey, path: str) -> RegistryKey:
        """Open a key writable, creating it and any missing parents.

        Raises:
            StorePermissionError: If the key cannot be created or opened writable.
            StoreError: For any other access failure.
        """

    def try_open_key(
        self, root: RootKey, path: str, *, writable: bool = False
    ) -> RegistryKey | None:
        """Open a key, returning None if it does not exist.

        Permission and other store errors still propagate.
        """
        try:
            return self.open_key(root, path, writable=writable)
        except KeyNotFoundError:
            return None


def join_path(*parts: str) -> str:
    """Join registry path segments with backslashes, skipping empty parts."""
    return "\\".join(part.strip("\\") for part in parts if part and part.strip("\\"))


def split_path(path: str) -> tuple[str, str]:
    """Split a registry sub-path into (parent path, leaf name).

    Returns:
        Tuple of parent path ("" for a top-level key) and leaf key name.
    """
    stripped = path.strip("\\")
    parent, sep, leaf = stripped.rpartition("\\")
    if not sep:
        return "", stripped
    return parent, leaf
