"""regctl configuration and settings.

This module provides the configuration model and I/O functions for the
discovery and lifecycle operations.

Configuration is stored in <config dir>/config.toml, for example:

    include_system_items = false
    include_com_handlers = true
    extra_skip_keys = ["cmd", "Powershell"]
    auto_backup_before_delete = true
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from regctl.core.paths import get_backup_dir, get_config_path


class RegctlConfig(BaseModel):
    """Settings controlling discovery and mutation.

    Attributes:
        include_system_items: Include entries whose program lives in the
            Windows directories.
        include_com_handlers: Scan ``shellex\\ContextMenuHandlers`` registrations.
        extra_skip_keys: Additional context-menu key names to never list.
        auto_backup_before_delete: Export an entry to a ``.reg`` file
            before deleting it.
        backup_dir: Directory for automatic backups (None = default state dir).
    """

    model_config = ConfigDict(extra="forbid")

    include_system_items: Annotated[
        bool,
        Field(description="List entries that run programs from the Windows directories"),
    ] = False
    include_com_handlers: Annotated[
        bool,
        Field(description="Scan shellex COM handler registrations"),
    ] = False
    extra_skip_keys: Annotated[
        list[str],
        Field(default_factory=list, description="Extra context-menu keys to skip"),
    ]
    auto_backup_before_delete: Annotated[
        bool,
        Field(description="Export entries to a .reg file before deleting them"),
    ] = False
    backup_dir: Annotated[
        Path | None,
        Field(description="Directory for automatic backups"),
    ] = None

    @field_validator("extra_skip_keys")
    @classmethod
    def validate_skip_keys(cls, v: list[str]) -> list[str]:
        """Strip whitespace and reject empty key names."""
        cleaned = [item.strip() for item in v]
        if any(not item for item in cleaned):
            msg = "extra_skip_keys cannot contain empty names"
            raise ValueError(msg)
        return cleaned

    @property
    def effective_backup_dir(self) -> Path:
        """Backup directory to use, falling back to the default state location."""
        return self.backup_dir or get_backup_dir()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> RegctlConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated RegctlConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return RegctlConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> RegctlConfig:
    """Load configuration, returning defaults if no config file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return RegctlConfig()


def save_config(config: RegctlConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The RegctlConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: RegctlConfig) -> dict[str, object]:
    """Convert RegctlConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset backup directory is omitted.
    """
    result: dict[str, object] = {
        "include_system_items": config.include_system_items,
        "include_com_handlers": config.include_com_handlers,
        "extra_skip_keys": list(config.extra_skip_keys),
        "auto_backup_before_delete": config.auto_backup_before_delete,
    }
    if config.backup_dir is not None:
        result["backup_dir"] = str(config.backup_dir)
    return result
