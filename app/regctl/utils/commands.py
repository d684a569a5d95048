"""Command-line parsing helpers.

Registry commands are free-form strings such as
``"C:\\Program Files\\Git\\git-bash.exe" --cd="%v."`` or
``C:\\Tools\\app.exe /background``. These helpers extract the executable
part for filtering and deduplication.
"""

import ntpath
import re

_UNQUOTED_MODULE = re.compile(r"^([^\"]+?\.(?:exe|dll))(?=\s|$|,)", re.IGNORECASE)


def extract_executable(command: str) -> str:
    """Extract the executable path from a command line.

    Handles, in order: a quoted leading path, an unquoted path ending in
    ``.exe`` or ``.dll`` (which may contain spaces), and finally the first
    whitespace-separated token.

    Args:
        command: Raw command string.

    Returns:
        Executable path without quotes or arguments, "" for an empty command.
    """
    command = command.strip()
    if not command:
        return ""

    if command.startswith('"'):
        end_quote = command.find('"', 1)
        if end_quote > 0:
            return command[1:end_quote]
        return command.strip('"')

    match = _UNQUOTED_MODULE.match(command)
    if match:
        return match.group(1)

    return command.split()[0]


def normalize_executable(command: str) -> str:
    """Return the case-folded executable of a command, used as a dedup key."""
    return extract_executable(command).replace("/", "\\").casefold()


def expand_executable(command: str) -> str:
    """Return the executable with ``%VAR%`` references expanded.

    Unknown variables are left as-is.
    """
    return ntpath.expandvars(extract_executable(command)).replace("/", "\\")
