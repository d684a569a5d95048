"""Enabled-state resolution for startup entries.

Task Manager records a disabled startup program as a binary value, named
after the Run value, under ``Explorer\\StartupApproved``. The first byte
of the value is the state; the remaining bytes hold a timestamp.
"""

import logging

from regctl.models.location import StartupLocation
from regctl.store.base import RegistryStore, StoreError, ValueKind

logger = logging.getLogger(__name__)

DISABLED_MARKER = 0x02
APPROVAL_VALUE_LENGTH = 12


def disabled_sentinel() -> bytes:
    """Return the value written to mark an entry disabled."""
    return bytes([DISABLED_MARKER]) + bytes(APPROVAL_VALUE_LENGTH - 1)


def is_disabled_marker(data: object) -> bool:
    """Decode an approval value.

    Only binary data whose first byte is the disabled marker means
    disabled; anything else, including empty or malformed data, does not.
    """
    if not isinstance(data, (bytes, bytearray)) or not data:
        return False
    return data[0] == DISABLED_MARKER


def is_startup_enabled(store: RegistryStore, location: StartupLocation, name: str) -> bool:
    """Resolve whether a startup entry is enabled.

    Args:
        store: Registry store capability.
        location: Run/RunOnce location of the entry.
        name: Value name of the entry.

    Returns:
        False only if the approval value exists and carries the disabled
        marker. Missing keys, missing values and read errors all resolve
        to enabled.
    """
    try:
        key = store.try_open_key(location.root, location.approved_path)
        if key is None:
            return True
        with key:
            value = key.get_value(name)
    except StoreError as e:
        logger.debug("Cannot read approval state of %s: %s", name, e)
        return True

    if value is None or value.kind is not ValueKind.BINARY:
        return True
    return not is_disabled_marker(value.data)
