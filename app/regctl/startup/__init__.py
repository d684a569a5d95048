"""Startup program management.

This package discovers Run/RunOnce registrations, resolves their
Task Manager approval state, and enables, disables or deletes them.
"""

from regctl.startup.approval import is_startup_enabled
from regctl.startup.operator import StartupOperator
from regctl.startup.scanner import STARTUP_KINDS, StartupScanner

__all__ = [
    "STARTUP_KINDS",
    "StartupOperator",
    "StartupScanner",
    "is_startup_enabled",
]
