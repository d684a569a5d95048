"""Context-menu entry models.

This module defines the data structures for context-menu handler
registrations discovered in the classes registry, including the object
contexts they attach to and their visibility.
"""

from dataclasses import dataclass
from enum import Enum

from regctl.models.location import ContextMenuLocation
from regctl.utils.commands import extract_executable


class MenuContext(str, Enum):
    """Object context a context-menu entry applies to.

    Attributes:
        FILE: Any file (``*``).
        DIRECTORY: A folder (``Directory``).
        DRIVE: A drive root (``Drive``).
        BACKGROUND: The empty area of an open folder (``Directory\\Background``).
    """

    FILE = "file"
    DIRECTORY = "directory"
    DRIVE = "drive"
    BACKGROUND = "background"

    @property
    def label(self) -> str:
        """Display label; the background context is surfaced as ``empty-area``."""
        if self is MenuContext.BACKGROUND:
            return "empty-area"
        return self.value

    @property
    def order(self) -> int:
        """Stable sort position of this context."""
        return _CONTEXT_ORDER.index(self)


_CONTEXT_ORDER: tuple[MenuContext, ...] = (
    MenuContext.FILE,
    MenuContext.DIRECTORY,
    MenuContext.DRIVE,
    MenuContext.BACKGROUND,
)


class Visibility(str, Enum):
    """When Explorer shows a context-menu entry.

    Attributes:
        NORMAL: Always shown.
        EXTENDED: Shown only when Shift is held (``Extended`` value present).
        HIDDEN: Never shown (``ProgrammaticAccessOnly`` value present).
    """

    NORMAL = "normal"
    EXTENDED = "extended"
    HIDDEN = "hidden"


def format_contexts(contexts: frozenset[MenuContext]) -> str:
    """Format a set of contexts as a stable, comma separated string.

    Args:
        contexts: Contexts to format.

    Returns:
        Labels in context order, e.g. ``"file, directory, empty-area"``.
    """
    return ", ".join(ctx.label for ctx in sorted(contexts, key=lambda c: c.order))


@dataclass(slots=True)
class ContextMenuEntry:
    """A deduplicated context-menu entry.

    Only ``enabled`` is mutated after discovery; it is updated by the
    operator after a store write.

    Attributes:
        key: Raw sub-key name, used for equivalence and to derive write paths.
        display_name: Resolved display name with accelerator markers stripped.
        command: Command line (verbs) or server path (COM handlers).
        contexts: Object contexts this entry is registered for.
        locations: Every registration backing this entry (never empty).
        enabled: False when the disabling sentinel is set.
        publisher: Best-effort publisher guess, None if unknown.
        visibility: Normal, Shift-only, or hidden.
    """

    key: str
    display_name: str
    command: str
    contexts: frozenset[MenuContext]
    locations: list[ContextMenuLocation]
    enabled: bool = True
    publisher: str | None = None
    visibility: Visibility = Visibility.NORMAL

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.key:
            msg = "Entry key cannot be empty"
            raise ValueError(msg)
        if not self.contexts:
            msg = f"Entry {self.key} must have at least one context"
            raise ValueError(msg)
        if not self.locations:
            msg = f"Entry {self.key} must have at least one location"
            raise ValueError(msg)

    @property
    def is_system_level(self) -> bool:
        """True if any backing location is system-level."""
        return any(loc.is_system_level for loc in self.locations)

    @property
    def is_com_handler(self) -> bool:
        """True if the entry is backed by COM handler registrations."""
        return any(loc.is_com_handler for loc in self.locations)

    @property
    def executable(self) -> str:
        """Executable path of the command, without quotes or arguments."""
        return extract_executable(self.command)

    @property
    def contexts_display(self) -> str:
        """Order-independent display string of the contexts."""
        return format_contexts(self.contexts)

    @property
    def primary_context(self) -> MenuContext:
        """First context in context order, used for sorting."""
        return min(self.contexts, key=lambda c: c.order)

    @property
    def sort_key(self) -> tuple[int, str, str]:
        """Sort key: (primary context, display name, key)."""
        return (self.primary_context.order, self.display_name.casefold(), self.key.casefold())
