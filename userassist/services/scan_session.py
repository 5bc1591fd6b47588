"""Scan session: single-flight background scans with snapshot handoff.

A session owns the current record snapshot. Scans run the blocking store
enumeration in a worker thread and resolve through a ScanHandle. Only a scan
that finishes in full replaces the snapshot, by a single reference swap, so
readers never see partial results. Cancelled scans hand their partial records
to the caller only.
"""

import asyncio
import logging
import threading
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Any

from userassist.exceptions import ScanInProgressError
from userassist.models.record import ArtifactRecord
from userassist.models.scan import ScanResult
from userassist.services.collector import ArtifactCollector
from userassist.services.events import ScanEventEmitter
from userassist.services.export import export_csv
from userassist.services.reporter import UsageReport, build_usage_report
from userassist.stores.base import KeyValueStore

logger = logging.getLogger(__name__)


class ScanHandle:
    """Cancellable handle on a running scan.

    Awaiting the handle (or ``result()``) yields the ScanResult, or raises the
    failure that stopped the scan.
    """

    def __init__(self, task: asyncio.Task, cancel_event: threading.Event, owner_identities: tuple[str, ...]):
        self._task = task
        self._cancel_event = cancel_event
        self.owner_identities = owner_identities

    def cancel(self) -> None:
        """Ask the scan to stop at the next entry boundary."""
        self._cancel_event.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def done(self) -> bool:
        return self._task.done()

    async def result(self) -> ScanResult:
        return await self._task

    def __await__(self) -> Generator[Any, None, ScanResult]:
        return self.result().__await__()


class ScanSession:
    """Owns the record snapshot and runs at most one scan at a time.

    Must be driven from a single event loop.
    """

    def __init__(
        self,
        store: KeyValueStore,
        emitter: ScanEventEmitter | None = None,
        collector: ArtifactCollector | None = None,
    ):
        self.store = store
        self.emitter = emitter or ScanEventEmitter()
        self.collector = collector or ArtifactCollector(store, self.emitter)
        self._snapshot: tuple[ArtifactRecord, ...] = ()
        self._last_result: ScanResult | None = None
        self._current: ScanHandle | None = None

    @property
    def snapshot(self) -> tuple[ArtifactRecord, ...]:
        """Records of the last scan that completed in full."""
        return self._snapshot

    @property
    def last_result(self) -> ScanResult | None:
        return self._last_result

    @property
    def is_scanning(self) -> bool:
        return self._current is not None and not self._current.done

    def start_scan(self, owner_identities: str | Iterable[str] | None = None) -> ScanHandle:
        """Start a background scan.

        Args:
            owner_identities: One identity, several, or None for every
                identity the store knows

        Returns:
            ScanHandle resolving to the ScanResult

        Raises:
            ScanInProgressError: A scan is already running
        """
        if self.is_scanning:
            raise ScanInProgressError()

        if owner_identities is None:
            identities = tuple(self.store.identities())
        elif isinstance(owner_identities, str):
            identities = (owner_identities,)
        else:
            identities = tuple(owner_identities)

        cancel_event = threading.Event()
        task = asyncio.create_task(self._run(identities, cancel_event), name="userassist-scan")
        self._current = ScanHandle(task, cancel_event, identities)
        return self._current

    async def scan(self, owner_identities: str | Iterable[str] | None = None) -> ScanResult:
        """Start a scan and wait for it."""
        return await self.start_scan(owner_identities)

    async def _run(self, identities: tuple[str, ...], cancel_event: threading.Event) -> ScanResult:
        try:
            result = await asyncio.to_thread(self.collector.scan_many, identities, cancel_event)
        except asyncio.CancelledError:
            # Let the worker thread wind down at its next check
            cancel_event.set()
            raise

        if result.is_complete:
            self._snapshot = result.records
            self._last_result = result
            logger.info("Installed snapshot of %d records", len(result.records))
        return result

    def report(self, top_n: int | None = None) -> UsageReport:
        """Usage comparison over the current snapshot."""
        return build_usage_report(self._snapshot, top_n)

    def export_csv(self, path: Path | str, encoding: str | None = None) -> int:
        """Export the current snapshot to CSV."""
        return export_csv(self._snapshot, path, encoding=encoding, emitter=self.emitter)
