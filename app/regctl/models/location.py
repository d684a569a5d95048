"""Location models for registry-backed entries.

A location is one concrete (root, path) registration backing a logical
entry. Context-menu entries may have several; startup entries always
have exactly one.
"""

from dataclasses import dataclass
from enum import Enum

from regctl.store.base import RootKey, split_path

RUN_PATH = r"Software\Microsoft\Windows\CurrentVersion\Run"
RUN_ONCE_PATH = r"Software\Microsoft\Windows\CurrentVersion\RunOnce"
APPROVED_RUN_PATH = r"Software\Microsoft\Windows\CurrentVersion\Explorer\StartupApproved\Run"
APPROVED_RUN32_PATH = r"Software\Microsoft\Windows\CurrentVersion\Explorer\StartupApproved\Run32"


@dataclass(frozen=True, slots=True)
class ContextMenuLocation:
    """One registration of a context-menu entry.

    Attributes:
        root: Registry root holding the key.
        sub_path: Path of the entry key below the root
            (e.g., ``Directory\\shell\\git_shell``).
        is_system_level: True for ``HKEY_CLASSES_ROOT`` registrations.
        is_com_handler: True for ``shellex\\ContextMenuHandlers`` registrations.
        handler_id: Normalized CLSID of a COM handler, None for verbs.
    """

    root: RootKey
    sub_path: str
    is_system_level: bool
    is_com_handler: bool = False
    handler_id: str | None = None

    def __post_init__(self) -> None:
        """Validate location data after initialization."""
        if not self.sub_path.strip("\\"):
            msg = "Location sub-path cannot be empty"
            raise ValueError(msg)

    @property
    def parent_path(self) -> str:
        """Path of the key containing the entry key."""
        return split_path(self.sub_path)[0]

    @property
    def key_name(self) -> str:
        """Leaf name of the entry key."""
        return split_path(self.sub_path)[1]

    @property
    def full_path(self) -> str:
        """Root name plus sub-path, as written in ``.reg`` files."""
        return f"{self.root.value}\\{self.sub_path}"


class StartupLocationKind(str, Enum):
    """Auto-start trigger an entry is registered under.

    Attributes:
        USER_RUN: ``HKCU\\...\\Run``, runs at every logon of the user.
        SYSTEM_RUN: ``HKLM\\...\\Run``, runs at every logon of any user.
        USER_RUN_ONCE: ``HKCU\\...\\RunOnce``, runs once at next logon.
        SYSTEM_RUN_ONCE: ``HKLM\\...\\RunOnce``, runs once at next logon.
    """

    USER_RUN = "user_run"
    SYSTEM_RUN = "system_run"
    USER_RUN_ONCE = "user_run_once"
    SYSTEM_RUN_ONCE = "system_run_once"

    @property
    def is_system_level(self) -> bool:
        """True for the per-machine kinds."""
        return self in (StartupLocationKind.SYSTEM_RUN, StartupLocationKind.SYSTEM_RUN_ONCE)

    @property
    def is_run_once(self) -> bool:
        """True for the RunOnce kinds."""
        return self in (StartupLocationKind.USER_RUN_ONCE, StartupLocationKind.SYSTEM_RUN_ONCE)

    @property
    def root(self) -> RootKey:
        """Registry root owning this kind."""
        return RootKey.LOCAL_MACHINE if self.is_system_level else RootKey.CURRENT_USER

    @property
    def run_path(self) -> str:
        """Run or RunOnce path below the root."""
        return RUN_ONCE_PATH if self.is_run_once else RUN_PATH

    @property
    def approved_path(self) -> str:
        """StartupApproved path tracking the disabled state of this kind."""
        return APPROVED_RUN32_PATH if self.is_system_level else APPROVED_RUN_PATH

    @property
    def label(self) -> str:
        """Short human-readable label (e.g., ``User Run``)."""
        scope = "System" if self.is_system_level else "User"
        trigger = "RunOnce" if self.is_run_once else "Run"
        return f"{scope} {trigger}"


@dataclass(frozen=True, slots=True)
class StartupLocation:
    """The single registration backing a startup entry.

    Attributes:
        kind: Which of the four Run/RunOnce locations holds the value.
    """

    kind: StartupLocationKind

    @property
    def root(self) -> RootKey:
        return self.kind.root

    @property
    def run_path(self) -> str:
        return self.kind.run_path

    @property
    def approved_path(self) -> str:
        return self.kind.approved_path

    @property
    def is_system_level(self) -> bool:
        return self.kind.is_system_level

    @property
    def registry_path(self) -> str:
        """Full owning path, e.g. ``HKEY_CURRENT_USER\\Software\\...\\Run``."""
        return f"{self.root.value}\\{self.run_path}"

    @property
    def approved_registry_path(self) -> str:
        """Full path of the StartupApproved key for this location."""
        return f"{self.root.value}\\{self.approved_path}"
