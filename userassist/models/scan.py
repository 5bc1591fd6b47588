"""Scan outcome model."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from userassist.models.record import ArtifactRecord, OwnerGroup


class ScanStatus(str, Enum):
    """How a scan pass ended."""

    COMPLETED = "completed"
    NO_DATA = "no_data"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MissingCategory:
    """A category key that did not exist for an owner identity."""

    owner_identity: str
    owner_group: OwnerGroup


@dataclass(frozen=True)
class ScanResult:
    """Immutable result of one scan pass.

    A cancelled scan carries whatever was accumulated before the cancellation
    was observed; ``NO_DATA`` is a finished scan that found nothing.
    """

    status: ScanStatus
    records: tuple[ArtifactRecord, ...] = ()
    owner_identities: tuple[str, ...] = ()
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    skipped_entries: int = 0
    missing_categories: tuple[MissingCategory, ...] = ()

    @property
    def is_complete(self) -> bool:
        return self.status in (ScanStatus.COMPLETED, ScanStatus.NO_DATA)

    @property
    def no_data(self) -> bool:
        return self.status == ScanStatus.NO_DATA

    @property
    def cancelled(self) -> bool:
        return self.status == ScanStatus.CANCELLED

    @property
    def duration_ms(self) -> int | None:
        if self.completed_at is None:
            return None
        return int((self.completed_at - self.started_at).total_seconds() * 1000)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "owner_identities": list(self.owner_identities),
            "record_count": len(self.records),
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "skipped_entries": self.skipped_entries,
            "missing_categories": [
                {"owner_identity": m.owner_identity, "owner_group": m.owner_group.value}
                for m in self.missing_categories
            ],
        }
