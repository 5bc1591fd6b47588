"""UserAssist artifact collection.

Walks the two UserAssist categories for an owner identity, decodes every
value and assembles the normalized record set. Anomalies in the data are
absorbed into the records; only a store that cannot be opened is raised.
"""

import logging
import threading
from collections.abc import Iterable
from datetime import UTC, datetime

from userassist.config import get_settings
from userassist.exceptions import KeyNotFoundError, StoreUnavailableError, ValueReadError
from userassist.models.record import ArtifactRecord, LayoutStatus, OwnerGroup
from userassist.models.scan import MissingCategory, ScanResult, ScanStatus
from userassist.parsers.cipher import decode_name
from userassist.parsers.layout import interpret
from userassist.services.events import ScanEvent, ScanEventEmitter, ScanEventType
from userassist.stores.base import KeyValueStore, RegistryValue
from userassist.utils.filetime import filetime_to_datetime

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (OwnerGroup.EXECUTABLE, OwnerGroup.SHORTCUT)


def build_record(owner_identity: str, owner_group: OwnerGroup, value: RegistryValue) -> ArtifactRecord:
    """Decode one registry value into an ArtifactRecord."""
    layout = interpret(value.data, value.value_type)

    last_executed = None
    if layout.status == LayoutStatus.MODERN and layout.raw_timestamp:
        last_executed = filetime_to_datetime(layout.raw_timestamp)

    return ArtifactRecord(
        encoded_name=value.name,
        decoded_name=decode_name(value.name),
        owner_group=owner_group,
        owner_identity=owner_identity,
        run_count=layout.run_count,
        focus_count=layout.focus_count,
        focus_duration_ms=layout.focus_duration_ms,
        last_executed=last_executed,
        layout_status=layout.status,
        raw_timestamp=layout.raw_timestamp or 0,
    )


class _Accumulator:
    """Mutable scan state, frozen into a ScanResult at the end."""

    def __init__(self):
        self.records: list[ArtifactRecord] = []
        self.skipped = 0
        self.missing: list[MissingCategory] = []


class ArtifactCollector:
    """Enumerates and decodes UserAssist values from a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        emitter: ScanEventEmitter | None = None,
        base_key: str | None = None,
        categories: Iterable[OwnerGroup] = DEFAULT_CATEGORIES,
    ):
        """Initialize the collector.

        Args:
            store: Registry store to enumerate
            emitter: Receives scan notifications (a private one if omitted)
            base_key: UserAssist key path (defaults to settings)
            categories: Categories to enumerate, in order
        """
        self.store = store
        self.emitter = emitter or ScanEventEmitter()
        self.base_key = (base_key or get_settings().userassist_base_key).strip("\\")
        self.categories = tuple(categories)

    def key_path(self, owner_group: OwnerGroup) -> str:
        """``<base>\\<CategoryGUID>\\Count`` for a category."""
        return f"{self.base_key}\\{owner_group.guid}\\Count"

    def scan(self, owner_identity: str, cancel_event: threading.Event | None = None) -> ScanResult:
        """Collect every UserAssist record for one owner identity.

        Args:
            owner_identity: Profile to scan
            cancel_event: Set to stop the scan between entries

        Returns:
            ScanResult; NO_DATA when nothing was found, CANCELLED with the
            partial records when ``cancel_event`` was set

        Raises:
            StoreUnavailableError: The identity's store cannot be opened
        """
        return self.scan_many([owner_identity], cancel_event)

    def scan_many(
        self,
        owner_identities: Iterable[str],
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Collect records for several owner identities in order."""
        identities = tuple(owner_identities)
        started_at = datetime.now(UTC)
        acc = _Accumulator()
        cancelled = False

        self._emit(
            ScanEventType.SCAN_STARTED,
            f"UserAssist scan started for {', '.join(identities) or 'no identities'}",
            data={"owner_identities": list(identities)},
        )

        try:
            for identity in identities:
                for group in self.categories:
                    if self._cancelled(cancel_event) or not self._collect_category(
                        identity, group, acc, cancel_event
                    ):
                        cancelled = True
                        break
                if cancelled:
                    break
        except StoreUnavailableError as e:
            self._emit(ScanEventType.SCAN_FAILED, e.message, owner_identity=e.owner_identity)
            raise

        if cancelled:
            status = ScanStatus.CANCELLED
        elif acc.records:
            status = ScanStatus.COMPLETED
        else:
            status = ScanStatus.NO_DATA

        result = ScanResult(
            status=status,
            records=tuple(acc.records),
            owner_identities=identities,
            started_at=started_at,
            completed_at=datetime.now(UTC),
            skipped_entries=acc.skipped,
            missing_categories=tuple(acc.missing),
        )
        self._emit_outcome(result)
        return result

    def _collect_category(
        self,
        owner_identity: str,
        owner_group: OwnerGroup,
        acc: _Accumulator,
        cancel_event: threading.Event | None,
    ) -> bool:
        """Append a category's records. Returns False if cancelled midway."""
        key_path = self.key_path(owner_group)

        try:
            names = self.store.list_value_names(owner_identity, key_path)
        except KeyNotFoundError as e:
            acc.missing.append(MissingCategory(owner_identity, owner_group))
            self._emit(
                ScanEventType.CATEGORY_MISSING,
                f"{owner_group.description} key not available for {owner_identity}",
                owner_identity=owner_identity,
                owner_group=owner_group,
                data={"key_path": key_path, "reason": e.code},
            )
            return True

        for name in names:
            if self._cancelled(cancel_event):
                return False

            try:
                value = self.store.read_value(owner_identity, key_path, name)
            except ValueReadError as e:
                acc.skipped += 1
                self._emit(
                    ScanEventType.ENTRY_SKIPPED,
                    f"Skipped unreadable UserAssist value: {e.message}",
                    owner_identity=owner_identity,
                    owner_group=owner_group,
                    data={"key_path": key_path, "name": name},
                )
                continue

            acc.records.append(build_record(owner_identity, owner_group, value))

        logger.debug(
            "Collected %s entries for %s (%s)", len(names), owner_identity, owner_group.description
        )
        return True

    @staticmethod
    def _cancelled(cancel_event: threading.Event | None) -> bool:
        return cancel_event is not None and cancel_event.is_set()

    def _emit_outcome(self, result: ScanResult) -> None:
        count = len(result.records)
        data = result.to_dict()
        if result.status == ScanStatus.CANCELLED:
            self._emit(ScanEventType.SCAN_CANCELLED, f"Scan cancelled after {count} entries", data=data)
        elif result.status == ScanStatus.NO_DATA:
            self._emit(ScanEventType.NO_DATA_FOUND, "No UserAssist data found", data=data)
        else:
            self._emit(ScanEventType.SCAN_COMPLETED, f"Scan finished: {count} entries found", data=data)

    def _emit(
        self,
        event_type: ScanEventType,
        message: str,
        owner_identity: str | None = None,
        owner_group: OwnerGroup | None = None,
        data: dict | None = None,
    ) -> None:
        self.emitter.emit(
            ScanEvent(
                type=event_type,
                message=message,
                owner_identity=owner_identity,
                owner_group=owner_group,
                data=data or {},
            )
        )
