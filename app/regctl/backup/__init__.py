"""Registry backup export.

This module provides the ``.reg`` value encoding and the exporters for
context-menu and startup entries.
"""

from regctl.backup.regfile import (
    REG_HEADER,
    escape_reg_string,
    format_hex_bytes,
    format_value,
)
from regctl.backup.writer import export_context_menu, export_startup, write_reg_file

__all__ = [
    "REG_HEADER",
    "escape_reg_string",
    "export_context_menu",
    "export_startup",
    "format_hex_bytes",
    "format_value",
    "write_reg_file",
]
