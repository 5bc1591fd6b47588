"""UserAssist record and scan result models."""

from userassist.models.record import ArtifactRecord, LayoutStatus, OwnerGroup
from userassist.models.scan import MissingCategory, ScanResult, ScanStatus

__all__ = [
    "ArtifactRecord",
    "LayoutStatus",
    "MissingCategory",
    "OwnerGroup",
    "ScanResult",
    "ScanStatus",
]
