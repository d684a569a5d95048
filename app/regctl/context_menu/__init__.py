"""Context-menu entry management.

This package discovers shell verbs and COM handlers, merges duplicate
registrations, and enables, disables or deletes the merged entries.
"""

from regctl.context_menu.dedup import deduplicate, equivalence_key
from regctl.context_menu.operator import ContextMenuOperator
from regctl.context_menu.scanner import CONTEXT_MENU_TARGETS, ContextMenuScanner

__all__ = [
    "CONTEXT_MENU_TARGETS",
    "ContextMenuOperator",
    "ContextMenuScanner",
    "deduplicate",
    "equivalence_key",
]
