"""Indirect resource string resolution.

Context-menu display names are often indirect references such as
``@shell32.dll,-8506`` that name a string inside a binary module. The
lookup itself is delegated to an injected resolver; on Windows the
default resolver calls ``SHLoadIndirectString``.
"""

import logging
import ntpath
import re
from collections.abc import Callable

from regctl.store import is_windows

logger = logging.getLogger(__name__)

# Given an indirect reference, return the display string or None on failure.
Resolver = Callable[[str], str | None]

_RESOURCE_SPLIT = re.compile(r"[.,]-")
_MAX_RESOURCE_LENGTH = 1024


def is_indirect(value: str) -> bool:
    """Check if a string is an indirect resource reference."""
    return value.startswith("@") or ".-" in value


def normalize_indirect(value: str) -> str:
    """Normalize a reference to the ``@module,-id`` form.

    ``C:\\path\\to.dll.-123`` becomes ``@C:\\path\\to.dll,-123``.
    """
    if ".-" in value:
        return "@" + value.lstrip("@").replace(".-", ",-")
    return value


def cleanup_unresolved(value: str) -> str:
    """Derive a readable name from a reference that could not be resolved.

    Strips the ``@`` prefix and, for ``module,-id`` references, returns
    the module file name without extension.

    Args:
        value: Unresolved reference.

    Returns:
        Best-effort readable text.
    """
    value = value.lstrip("@")
    if ".-" in value or ",-" in value:
        module = _RESOURCE_SPLIT.split(value, maxsplit=1)[0]
        stem, _ = ntpath.splitext(ntpath.basename(module))
        if stem:
            return stem
    return value


def resolve_display_string(value: str, resolver: Resolver | None) -> str:
    """Resolve a display string, leaving plain text untouched.

    Args:
        value: Raw display string from the registry.
        resolver: Resolver collaborator, or None if unavailable.

    Returns:
        Resolved text, or a cleaned-up fallback if resolution failed.
    """
    if not value.strip() or not is_indirect(value):
        return value

    if resolver is not None:
        reference = normalize_indirect(value)
        try:
            resolved = resolver(reference)
        except (OSError, ValueError) as e:
            logger.debug("Failed to resolve resource string '%s': %s", value, e)
            resolved = None
        if resolved:
            return resolved

    return cleanup_unresolved(value)


def shlwapi_resolver(reference: str) -> str | None:
    """Resolve a reference with ``SHLoadIndirectString`` (Windows only).

    Args:
        reference: Normalized ``@module,-id`` reference.

    Returns:
        Resolved string, or None if the call failed.
    """
    import ctypes

    buffer = ctypes.create_unicode_buffer(_MAX_RESOURCE_LENGTH)
    result = ctypes.windll.shlwapi.SHLoadIndirectString(  # type: ignore[attr-defined]
        reference, buffer, _MAX_RESOURCE_LENGTH, None
    )
    if result != 0 or not buffer.value:
        return None
    return buffer.value


def get_default_resolver() -> Resolver | None:
    """Return the platform resolver, None when not running on Windows."""
    if is_windows():
        return shlwapi_resolver
    return None
