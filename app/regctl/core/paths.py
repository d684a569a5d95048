"""Path management for regctl.

This module provides standardized paths for configuration and state
storage. On Windows the per-user application data folders are used;
elsewhere the XDG Base Directory Specification is followed.

Defaults:
- Config: %APPDATA%\\regctl\\ (or ~/.config/regctl/)
- State: %LOCALAPPDATA%\\regctl\\ (or ~/.local/state/regctl/)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "regctl"


def _get_app_dir(windows_var: str, xdg_var: str, default_subdir: str) -> Path:
    """Get an application directory respecting environment overrides.

    Args:
        windows_var: Windows folder variable (e.g., "APPDATA").
        xdg_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    for env_var in (windows_var, xdg_var):
        base = os.environ.get(env_var)
        if base:
            return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to %APPDATA%\\regctl (or XDG_CONFIG_HOME/regctl, ~/.config/regctl).
    """
    return _get_app_dir("APPDATA", "XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes registry backups taken before deletions.

    Returns:
        Path to %LOCALAPPDATA%\\regctl (or XDG_STATE_HOME/regctl,
        ~/.local/state/regctl).
    """
    return _get_app_dir("LOCALAPPDATA", "XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to <config dir>/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_backup_dir() -> Path:
    """Get the default directory for automatic registry backups.

    Returns:
        Path to <state dir>/backups.
    """
    return get_state_dir() / "backups"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_backup_dir(path: Path | None = None) -> Path:
    """Create the backup directory if it doesn't exist.

    Args:
        path: Directory to create. If None, uses the default backup directory.

    Returns:
        Path to the backup directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path or get_backup_dir(), "backup")
