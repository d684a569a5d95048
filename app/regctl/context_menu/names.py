"""Display-name helpers for context-menu entries."""

import uuid

from regctl.core.resolver import Resolver, resolve_display_string

_LITERAL_AMPERSAND = "\x00"


def strip_accelerators(text: str) -> str:
    """Remove keyboard-accelerator markers from a menu caption.

    A single ``&`` marks the following character as the accelerator and
    is removed; ``&&`` is an escaped literal ampersand and becomes ``&``.

    Example:
        >>> strip_accelerators("Open with &Code")
        'Open with Code'
        >>> strip_accelerators("Save && &Exit")
        'Save & Exit'
    """
    return (
        text.replace("&&", _LITERAL_AMPERSAND)
        .replace("&", "")
        .replace(_LITERAL_AMPERSAND, "&")
    )


def normalize_guid(value: str | None) -> str | None:
    """Normalize a CLSID string to ``{XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX}``.

    Args:
        value: Candidate GUID, with or without braces, any case.

    Returns:
        Upper-case braced GUID, or None if the value is not a GUID.
    """
    if not value:
        return None
    text = value.strip()
    if not (text.startswith("{") and text.endswith("}")) and len(text) != 36:
        return None
    try:
        parsed = uuid.UUID(text.strip("{}"))
    except ValueError:
        return None
    return "{" + str(parsed).upper() + "}"


def resolve_display_name(raw: str, fallback: str, resolver: Resolver | None) -> str:
    """Resolve and clean a display name.

    Args:
        raw: Raw caption from the registry (may be an indirect reference).
        fallback: Name to use if the caption resolves to nothing.
        resolver: Resource string resolver collaborator.

    Returns:
        Resolved caption with accelerator markers stripped.
    """
    name = strip_accelerators(resolve_display_string(raw, resolver)).strip()
    return name or fallback
