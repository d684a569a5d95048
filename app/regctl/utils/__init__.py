"""Utility modules for regctl.

This module exports commonly used utility functions.
"""

from regctl.utils.commands import expand_executable, extract_executable, normalize_executable
from regctl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "expand_executable",
    "extract_executable",
    "normalize_executable",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
