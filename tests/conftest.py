"""Pytest configuration and shared fixtures.

This module contains an in-memory registry store and fixtures used
across all test modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from regctl.store.base import (
    KeyNotFoundError,
    RegistryKey,
    RegistryStore,
    RegistryValue,
    RootKey,
    StorePermissionError,
    ValueKind,
    join_path,
)

SYSTEM_DIRS = ("C:\\Windows", "C:\\Windows\\System32", "C:\\Windows\\SysWOW64")


@dataclass
class _Node:
    name: str
    children: dict[str, _Node] = field(default_factory=dict)
    values: dict[str, RegistryValue] = field(default_factory=dict)


def _parts(path: str) -> list[str]:
    return [part for part in path.split("\\") if part]


class FakeRegistryKey(RegistryKey):
    """Handle on a node of the in-memory registry."""

    def __init__(
        self, store: FakeRegistryStore, root: RootKey, path: str, node: _Node, writable: bool
    ) -> None:
        self._store = store
        self._root = root
        self._path = path
        self._node = node
        self._writable = writable
        self.closed = False
        store.open_handles += 1

    def _check_writable(self) -> None:
        if not self._writable:
            msg = f"Key opened read-only: {self._path}"
            raise StorePermissionError(msg)

    def subkey_names(self) -> list[str]:
        return [child.name for child in self._node.children.values()]

    def value_names(self) -> list[str]:
        return [value.name for value in self._node.values.values()]

    def get_value(self, name: str) -> RegistryValue | None:
        return self._node.values.get(name.casefold())

    def set_value(self, value: RegistryValue) -> None:
        self._check_writable()
        self._node.values[value.name.casefold()] = value

    def delete_value(self, name: str) -> bool:
        self._check_writable()
        return self._node.values.pop(name.casefold(), None) is not None

    def delete_subkey_tree(self, name: str) -> bool:
        self._check_writable()
        return self._node.children.pop(name.casefold(), None) is not None

    def open_subkey(self, name: str, *, writable: bool = False) -> RegistryKey | None:
        child = self._node.children.get(name.casefold())
        if child is None:
            return None
        child_path = join_path(self._path, name)
        self._store.check_access(self._root, child_path, writable=writable)
        return FakeRegistryKey(self._store, self._root, child_path, child, writable)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._store.open_handles -= 1


class FakeRegistryStore(RegistryStore):
    """In-memory registry store.

    Names are case-insensitive like the real registry. Paths added to
    ``denied_writes`` raise StorePermissionError when opened writable or
    created; paths in ``denied_reads`` raise it on any open.
    ``open_handles`` counts handles not yet closed.
    """

    def __init__(self) -> None:
        self._roots = {root: _Node(root.value) for root in RootKey}
        self.denied_writes: set[tuple[RootKey, str]] = set()
        self.denied_reads: set[tuple[RootKey, str]] = set()
        self.open_handles = 0

    # Test helpers

    def deny_write(self, root: RootKey, path: str) -> None:
        self.denied_writes.add((root, path.casefold()))

    def deny_read(self, root: RootKey, path: str) -> None:
        self.denied_reads.add((root, path.casefold()))

    def check_access(self, root: RootKey, path: str, *, writable: bool) -> None:
        if (root, path.casefold()) in self.denied_reads:
            msg = f"Access is denied: {root.value}\\{path}"
            raise StorePermissionError(msg)
        if writable and (root, path.casefold()) in self.denied_writes:
            msg = f"Access is denied: {root.value}\\{path}"
            raise StorePermissionError(msg)

    def add_key(self, root: RootKey, path: str) -> None:
        self._ensure(root, path)

    def put(
        self,
        root: RootKey,
        path: str,
        name: str,
        data: Any,
        kind: ValueKind = ValueKind.STRING,
    ) -> None:
        """Create the key if needed and set a value on it."""
        node = self._ensure(root, path)
        node.values[name.casefold()] = RegistryValue(name, kind, data)

    def has_key(self, root: RootKey, path: str) -> bool:
        return self._find(root, path) is not None

    def value(self, root: RootKey, path: str, name: str) -> RegistryValue | None:
        node = self._find(root, path)
        if node is None:
            return None
        return node.values.get(name.casefold())

    def _find(self, root: RootKey, path: str) -> _Node | None:
        node = self._roots[root]
        for part in _parts(path):
            child = node.children.get(part.casefold())
            if child is None:
                return None
            node = child
        return node

    def _ensure(self, root: RootKey, path: str) -> _Node:
        node = self._roots[root]
        for part in _parts(path):
            node = node.children.setdefault(part.casefold(), _Node(part))
        return node

    # RegistryStore

    def open_key(self, root: RootKey, path: str, *, writable: bool = False) -> RegistryKey:
        node = self._find(root, path)
        if node is None:
            msg = f"Key not found: {root.value}\\{path}"
            raise KeyNotFoundError(msg)
        self.check_access(root, path, writable=writable)
        return FakeRegistryKey(self, root, path, node, writable)

    def create_key(self, root: RootKey, path: str) -> RegistryKey:
        self.check_access(root, path, writable=True)
        return FakeRegistryKey(self, root, path, self._ensure(root, path), True)


@pytest.fixture
def store() -> FakeRegistryStore:
    """Empty in-memory registry."""
    return FakeRegistryStore()


@pytest.fixture
def system_dirs() -> tuple[str, ...]:
    """Windows directories as detected on a default installation."""
    return SYSTEM_DIRS
