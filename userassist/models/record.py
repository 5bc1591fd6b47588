"""Normalized, version-independent UserAssist record."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class LayoutStatus(str, Enum):
    """Which decoding path produced a record."""

    MODERN = "modern"
    LEGACY = "legacy"
    INVALID = "invalid"


class OwnerGroup(str, Enum):
    """UserAssist categories, keyed by their registry GUID."""

    EXECUTABLE = "{CEBFF5CD-ACE2-4F4F-9178-9926F41749EA}"
    SHORTCUT = "{F4E57C4B-2036-45F0-A9AB-443BCFE33D9F}"

    @property
    def guid(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return _GROUP_DESCRIPTIONS[self]


_GROUP_DESCRIPTIONS = {
    OwnerGroup.EXECUTABLE: "Executable File Execution",
    OwnerGroup.SHORTCUT: "Shortcut File Execution",
}


@dataclass(frozen=True)
class ArtifactRecord:
    """One decoded UserAssist entry.

    Counters the source layout did not carry are 0; ``layout_status`` tells
    whether a 0 came from the data or from the layout. ``raw_timestamp`` keeps
    the undecoded FILETIME so an unconvertible value can be told apart from
    "never executed".
    """

    encoded_name: str
    decoded_name: str
    owner_group: OwnerGroup
    owner_identity: str
    run_count: int = 0
    focus_count: int = 0
    focus_duration_ms: int = 0
    last_executed: datetime | None = None
    layout_status: LayoutStatus = LayoutStatus.INVALID
    raw_timestamp: int = 0

    @property
    def has_focus_data(self) -> bool:
        """Focus counters are only carried by the modern layout."""
        return self.layout_status == LayoutStatus.MODERN

    @property
    def path(self) -> str:
        """Decoded name without a leading known-folder GUID prefix."""
        name = self.decoded_name
        if name.startswith("{") and "}" in name:
            return name.split("}", 1)[-1].lstrip("\\")
        return name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "encoded_name": self.encoded_name,
            "decoded_name": self.decoded_name,
            "owner_group": self.owner_group.value,
            "owner_identity": self.owner_identity,
            "run_count": self.run_count,
            "focus_count": self.focus_count,
            "focus_duration_ms": self.focus_duration_ms,
            "last_executed": self.last_executed.isoformat() if self.last_executed else None,
            "layout_status": self.layout_status.value,
        }
