"""Live registry store backed by the ``winreg`` module.

Only importable on Windows. Errors raised by ``winreg`` are mapped onto
the store exception hierarchy so callers never deal with raw OSErrors.
"""

import logging
import winreg
from collections.abc import Iterator
from contextlib import contextmanager

from regctl.store.base import (
    KeyNotFoundError,
    RegistryKey,
    RegistryStore,
    RegistryValue,
    RootKey,
    StoreError,
    StorePermissionError,
    ValueKind,
)

logger = logging.getLogger(__name__)

_ROOT_HANDLES: dict[RootKey, int] = {
    RootKey.CLASSES_ROOT: winreg.HKEY_CLASSES_ROOT,
    RootKey.CURRENT_USER: winreg.HKEY_CURRENT_USER,
    RootKey.LOCAL_MACHINE: winreg.HKEY_LOCAL_MACHINE,
}

_KIND_FROM_TYPE: dict[int, ValueKind] = {
    winreg.REG_SZ: ValueKind.STRING,
    winreg.REG_EXPAND_SZ: ValueKind.EXPAND_STRING,
    winreg.REG_MULTI_SZ: ValueKind.MULTI_STRING,
    winreg.REG_BINARY: ValueKind.BINARY,
    winreg.REG_DWORD: ValueKind.DWORD,
    winreg.REG_QWORD: ValueKind.QWORD,
}

_TYPE_FROM_KIND: dict[ValueKind, int] = {kind: typ for typ, kind in _KIND_FROM_TYPE.items()}

_READ_ACCESS = winreg.KEY_READ
_WRITE_ACCESS = winreg.KEY_READ | winreg.KEY_WRITE


@contextmanager
def _mapped_errors(what: str) -> Iterator[None]:
    """Translate winreg OSErrors into store exceptions."""
    try:
        yield
    except FileNotFoundError as e:
        raise KeyNotFoundError(f"{what}: not found") from e
    except PermissionError as e:
        raise StorePermissionError(f"{what}: access denied") from e
    except OSError as e:
        raise StoreError(f"{what}: {e}") from e


class WinregKey(RegistryKey):
    """Open ``winreg`` key handle."""

    def __init__(self, handle: winreg.HKEYType, path: str, writable: bool) -> None:
        self._handle = handle
        self._path = path
        self._writable = writable

    def subkey_names(self) -> list[str]:
        names: list[str] = []
        with _mapped_errors(f"Enumerating subkeys of {self._path}"):
            count, _, _ = winreg.QueryInfoKey(self._handle)
            for index in range(count):
                names.append(winreg.EnumKey(self._handle, index))
        return names

    def value_names(self) -> list[str]:
        names: list[str] = []
        with _mapped_errors(f"Enumerating values of {self._path}"):
            _, count, _ = winreg.QueryInfoKey(self._handle)
            for index in range(count):
                name, _, _ = winreg.EnumValue(self._handle, index)
                names.append(name)
        return names

    def get_value(self, name: str) -> RegistryValue | None:
        try:
            with _mapped_errors(f"Reading value '{name}' of {self._path}"):
                data, value_type = winreg.QueryValueEx(self._handle, name)
        except KeyNotFoundError:
            return None

        kind = _KIND_FROM_TYPE.get(value_type, ValueKind.OTHER)
        if kind == ValueKind.BINARY and data is None:
            data = b""
        return RegistryValue(name=name, kind=kind, data=data)

    def set_value(self, value: RegistryValue) -> None:
        if not self._writable:
            msg = f"Key {self._path} is not open for writing"
            raise StorePermissionError(msg)
        value_type = _TYPE_FROM_KIND.get(value.kind)
        if value_type is None:
            msg = f"Cannot write value of kind {value.kind.value}"
            raise StoreError(msg)
        with _mapped_errors(f"Writing value '{value.name}' of {self._path}"):
            winreg.SetValueEx(self._handle, value.name, 0, value_type, value.data)

    def delete_value(self, name: str) -> bool:
        try:
            with _mapped_errors(f"Deleting value '{name}' of {self._path}"):
                winreg.DeleteValue(self._handle, name)
        except KeyNotFoundError:
            return False
        return True

    def delete_subkey_tree(self, name: str) -> bool:
        child = self.open_subkey(name, writable=True)
        if child is None:
            return False
        with child:
            for grandchild in child.subkey_names():
                child.delete_subkey_tree(grandchild)
        with _mapped_errors(f"Deleting key {self._path}\\{name}"):
            winreg.DeleteKey(self._handle, name)
        return True

    def open_subkey(self, name: str, *, writable: bool = False) -> RegistryKey | None:
        access = _WRITE_ACCESS if writable else _READ_ACCESS
        path = f"{self._path}\\{name}"
        try:
            with _mapped_errors(f"Opening {path}"):
                handle = winreg.OpenKeyEx(self._handle, name, 0, access)
        except KeyNotFoundError:
            return None
        return WinregKey(handle, path, writable)

    def close(self) -> None:
        try:
            self._handle.Close()
        except OSError as e:
            logger.debug("Failed to close %s: %s", self._path, e)


class WinregStore(RegistryStore):
    """Registry store over the live Windows registry."""

    def open_key(self, root: RootKey, path: str, *, writable: bool = False) -> RegistryKey:
        access = _WRITE_ACCESS if writable else _READ_ACCESS
        with _mapped_errors(f"Opening {root.value}\\{path}"):
            handle = winreg.OpenKeyEx(_ROOT_HANDLES[root], path, 0, access)
        return WinregKey(handle, f"{root.value}\\{path}", writable)

    def create_key(self, root: RootKey, path: str) -> RegistryKey:
        with _mapped_errors(f"Creating {root.value}\\{path}"):
            handle = winreg.CreateKeyEx(_ROOT_HANDLES[root], path, 0, _WRITE_ACCESS)
        return WinregKey(handle, f"{root.value}\\{path}", True)
