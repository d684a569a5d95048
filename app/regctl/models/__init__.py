"""Data models for regctl.

This module exports the core data structures used throughout the application.
"""

from regctl.models.context_menu import (
    ContextMenuEntry,
    MenuContext,
    Visibility,
    format_contexts,
)
from regctl.models.location import (
    ContextMenuLocation,
    StartupLocation,
    StartupLocationKind,
)
from regctl.models.result import BackupResult, LocationResult, MutationResult, Operation
from regctl.models.startup import StartupEntry

__all__ = [
    "BackupResult",
    "ContextMenuEntry",
    "ContextMenuLocation",
    "LocationResult",
    "MenuContext",
    "MutationResult",
    "Operation",
    "StartupEntry",
    "StartupLocation",
    "StartupLocationKind",
    "Visibility",
    "format_contexts",
]
