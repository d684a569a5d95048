"""Startup entry model.

This module defines the data structure for auto-start programs
registered under the Run and RunOnce keys.
"""

from dataclasses import dataclass

from regctl.models.location import StartupLocation, StartupLocationKind
from regctl.utils.commands import extract_executable


@dataclass(slots=True)
class StartupEntry:
    """A program registered to start at logon.

    Entries are unique by (location kind, name) only; the same name under
    Run and RunOnce, or under the user and machine roots, is a different
    entry. ``enabled`` is derived from the StartupApproved key on every
    discovery and updated by the operator after a store write.

    Attributes:
        name: Value name under the Run/RunOnce key.
        command: Command line that is executed.
        location: Run/RunOnce location holding the value.
        enabled: False when StartupApproved marks the entry disabled.
        publisher: Best-effort publisher guess, None if unknown.
    """

    name: str
    command: str
    location: StartupLocation
    enabled: bool = True
    publisher: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Startup entry name cannot be empty"
            raise ValueError(msg)

    @property
    def kind(self) -> StartupLocationKind:
        return self.location.kind

    @property
    def registry_path(self) -> str:
        """Full owning registry path of the value."""
        return self.location.registry_path

    @property
    def is_system_level(self) -> bool:
        return self.location.is_system_level

    @property
    def executable(self) -> str:
        """Executable path of the command, without quotes or arguments."""
        return extract_executable(self.command)

    @property
    def identity(self) -> tuple[StartupLocationKind, str]:
        """Unique identity of the entry: (location kind, lowercased name)."""
        return (self.location.kind, self.name.casefold())
