"""Scan notifications.

The engine reports progress and anomalies as ScanEvent values through a
ScanEventEmitter instead of writing to a shared log or status line. How an
event is shown or persisted is up to the subscriber.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from userassist.models.record import OwnerGroup

logger = logging.getLogger(__name__)


class ScanEventType(str, Enum):
    """Kinds of scan notifications."""

    SCAN_STARTED = "scan_started"
    CATEGORY_MISSING = "category_missing"
    ENTRY_SKIPPED = "entry_skipped"
    SCAN_COMPLETED = "scan_completed"
    NO_DATA_FOUND = "no_data_found"
    SCAN_CANCELLED = "scan_cancelled"
    SCAN_FAILED = "scan_failed"
    EXPORT_COMPLETED = "export_completed"


# Log level used when an event is mirrored to the logger
_EVENT_LOG_LEVELS = {
    ScanEventType.ENTRY_SKIPPED: logging.DEBUG,
    ScanEventType.CATEGORY_MISSING: logging.INFO,
    ScanEventType.SCAN_FAILED: logging.ERROR,
    ScanEventType.SCAN_CANCELLED: logging.WARNING,
}


@dataclass(frozen=True)
class ScanEvent:
    """A single notification emitted by the engine."""

    type: ScanEventType
    message: str
    owner_identity: str | None = None
    owner_group: OwnerGroup | None = None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "message": self.message,
            "owner_identity": self.owner_identity,
            "owner_group": self.owner_group.value if self.owner_group else None,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


ScanEventListener = Callable[[ScanEvent], None]


class ScanEventEmitter:
    """Fan-out of scan events to subscribed listeners.

    Events from a running scan are emitted on the worker thread, so listeners
    must be thread-safe. A failing listener is logged and does not stop
    delivery to the others or the scan itself.
    """

    def __init__(self):
        self._listeners: list[ScanEventListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: ScanEventListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: ScanEventListener) -> bool:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
                return True
        return False

    def emit(self, event: ScanEvent) -> None:
        logger.log(_EVENT_LOG_LEVELS.get(event.type, logging.INFO), event.message)

        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Scan event listener failed for %s", event.type.value)
