"""regctl - Windows context-menu and startup entry manager."""

__version__ = "0.1.0"
