"""CLI commands for regctl.

This package contains all subcommand implementations.
"""

from regctl.cli.commands import menu, startup

__all__ = ["menu", "startup"]
