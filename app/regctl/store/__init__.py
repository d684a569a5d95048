"""Registry store capability.

This module exports the store interface, value types and errors, plus a
factory for the live Windows store.
"""

import sys

from regctl.store.base import (
    KeyNotFoundError,
    RegistryKey,
    RegistryStore,
    RegistryValue,
    RootKey,
    StoreError,
    StorePermissionError,
    ValueKind,
    join_path,
    split_path,
)


def is_windows() -> bool:
    """Check whether the live registry is available on this platform."""
    return sys.platform == "win32"


def get_default_store() -> RegistryStore:
    """Create the live registry store.

    Returns:
        WinregStore instance.

    Raises:
        RuntimeError: If not running on Windows.
    """
    if not is_windows():
        msg = "The Windows registry is not available on this platform"
        raise RuntimeError(msg)

    from regctl.store.winreg_store import WinregStore

    return WinregStore()


__all__ = [
    "KeyNotFoundError",
    "RegistryKey",
    "RegistryStore",
    "RegistryValue",
    "RootKey",
    "StoreError",
    "StorePermissionError",
    "ValueKind",
    "get_default_store",
    "is_windows",
    "join_path",
    "split_path",
]
