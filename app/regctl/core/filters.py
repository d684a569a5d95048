"""Filters excluding entries regctl must not manage.

This module defines the built-in context-menu keys that are never
user-manageable and the runtime check for programs living in the
Windows installation directories.
"""

import ntpath
import os
from collections.abc import Iterable, Sequence

from regctl.utils.commands import expand_executable

# Built-in shell verbs that are never user-manageable (compared case-insensitively).
BUILTIN_SKIP_KEYS: tuple[str, ...] = (
    "pintostartscreen",
    "pintohome",
    "windows.modernshare",
    "windows.share",
    "copyaspath",
    "copyto",
    "moveto",
    "sendto",
    "opennewwindow",
    "opennewprocess",
)

# Startup programs shipped with Windows that live outside the system directories.
STARTUP_SYSTEM_MARKERS: tuple[str, ...] = (
    "securityhealthsystray.exe",
    "windowsdefender",
)


def is_builtin_key(name: str, extra: Iterable[str] = ()) -> bool:
    """Check if a context-menu key is a built-in Windows verb.

    Args:
        name: Sub-key name to check.
        extra: Additional key names to skip (from configuration).

    Returns:
        True if the name matches the built-in list or ``extra``, ignoring case.
    """
    folded = name.casefold()
    if folded in BUILTIN_SKIP_KEYS:
        return True
    return any(folded == item.casefold() for item in extra)


def detect_system_directories() -> tuple[str, ...]:
    """Detect the Windows installation directories at runtime.

    Uses ``SystemRoot`` (falling back to ``windir``) and derives the
    native and 32-bit system directories from it.

    Returns:
        Tuple of directory paths; empty if no Windows directory is known.
    """
    windows_dir = os.environ.get("SystemRoot") or os.environ.get("windir")
    if not windows_dir:
        return ()
    return (
        windows_dir,
        ntpath.join(windows_dir, "System32"),
        ntpath.join(windows_dir, "SysWOW64"),
    )


def is_system_program(
    command: str,
    system_dirs: Sequence[str],
    markers: Iterable[str] = (),
) -> bool:
    """Check if a command runs a program from the Windows installation.

    The executable is extracted from the command (quotes and arguments
    removed, ``%VAR%`` expanded) and compared by case-insensitive prefix
    against each directory.

    Args:
        command: Command line from the registry.
        system_dirs: Windows directories detected at runtime.
        markers: Extra case-insensitive substrings that mark a system program.

    Returns:
        True if the program belongs to Windows and should be hidden.
    """
    executable = expand_executable(command).casefold()
    if not executable:
        return False

    for directory in system_dirs:
        prefix = directory.rstrip("\\/").replace("/", "\\").casefold()
        if prefix and executable.startswith(prefix + "\\"):
            return True

    return any(marker.casefold() in executable for marker in markers)
