"""CLI package for regctl.

This package contains the Typer application and all subcommands.
"""

from regctl.cli.main import app

__all__ = ["app"]
