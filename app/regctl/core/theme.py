"""Console colors for the regctl CLI.

The palette is read from the bundled ``data/theme.toml``.
"""

import logging
import re
import tomllib
from functools import cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Palette of the CLI styles, each color as ``#RGB`` or ``#RRGGBB``."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    entry_enabled: str = "#69B9A1"
    entry_disabled: str = "#7f8c8d"
    scope_system: str = "#d44ebc"
    scope_user: str = "#0e8ac8"

    @field_validator("*")
    @classmethod
    def check_hex_color(cls, v: str) -> str:
        color = v.strip()
        if not _HEX_COLOR.fullmatch(color):
            msg = f"invalid hex color '{v}'"
            raise ValueError(msg)
        return color

    def styles(self) -> dict[str, str]:
        """Rich style definitions keyed by the names used in console markup."""
        return {
            "text": self.text,
            "muted": self.muted,
            "border": self.border,
            "bold_header": f"bold {self.header}",
            "success": self.success,
            "warning": self.warning,
            "error": f"bold {self.error}",
            "info": self.info,
            "entry_enabled": f"bold {self.entry_enabled}",
            "entry_disabled": self.entry_disabled,
            "scope_system": self.scope_system,
            "scope_user": self.scope_user,
        }


def load_colors(path: Path | None = None) -> ThemeColors:
    """Load the palette from a theme file.

    Args:
        path: Theme file to read; the bundled theme if None.

    Returns:
        ThemeColors; the built-in defaults if the file is unusable.
    """
    source: Traversable | Path = path or resources.files("regctl.data").joinpath("theme.toml")
    try:
        data = tomllib.loads(source.read_text(encoding="utf-8"))
        return ThemeColors(**data.get("colors", {}))
    except (OSError, tomllib.TOMLDecodeError, ValidationError, TypeError) as e:
        logger.warning("Cannot load theme %s, using defaults: %s", source, e)
        return ThemeColors()


@cache
def get_theme() -> Theme:
    """Get the Rich theme, loading it on first use."""
    return Theme(load_colors().styles())
