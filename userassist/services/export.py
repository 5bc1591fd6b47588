"""Tabular projection of UserAssist records and CSV export."""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from userassist.config import get_settings
from userassist.exceptions import ExportError
from userassist.models.record import ArtifactRecord, LayoutStatus
from userassist.services.events import ScanEvent, ScanEventEmitter, ScanEventType
from userassist.utils.duration import format_duration

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Decoded Path",
    "Encoded Name (ROT13)",
    "Run Count",
    "Last Executed",
    "Focus Count",
    "Focus Time",
    "GUID",
    "Username",
]

NEVER_EXECUTED = "Never"
LEGACY_UNKNOWN = "Unknown (legacy format)"
INVALID_DATA = "Invalid data"
INVALID_TIMESTAMP = "Invalid timestamp"


def format_last_executed(record: ArtifactRecord, timestamp_format: str | None = None) -> str:
    """Render ``last_executed`` for display, naming why it may be absent."""
    if record.layout_status == LayoutStatus.LEGACY:
        return LEGACY_UNKNOWN
    if record.layout_status == LayoutStatus.INVALID:
        return INVALID_DATA
    if record.last_executed is not None:
        return record.last_executed.strftime(timestamp_format or get_settings().timestamp_format)
    if record.raw_timestamp:
        return INVALID_TIMESTAMP
    return NEVER_EXECUTED


def project_record(record: ArtifactRecord, timestamp_format: str | None = None) -> list[str]:
    """One export row, columns in EXPORT_COLUMNS order."""
    return [
        record.decoded_name,
        record.encoded_name,
        str(record.run_count),
        format_last_executed(record, timestamp_format),
        str(record.focus_count),
        format_duration(record.focus_duration_ms),
        record.owner_group.value,
        record.owner_identity,
    ]


def export_csv(
    records: Iterable[ArtifactRecord],
    path: Path | str,
    encoding: str | None = None,
    emitter: ScanEventEmitter | None = None,
) -> int:
    """Write records to a CSV file.

    Args:
        records: Records to export
        path: Destination file, overwritten if present
        encoding: Text encoding (defaults to settings, UTF-8 with BOM)
        emitter: Optional notification sink

    Returns:
        Number of data rows written

    Raises:
        ExportError: The destination cannot be created or written
    """
    settings = get_settings()
    path = Path(path)
    encoding = encoding or settings.export_encoding
    rows = 0

    try:
        with open(path, "w", encoding=encoding, newline="") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL)
            writer.writerow(EXPORT_COLUMNS)
            for record in records:
                writer.writerow(project_record(record, settings.timestamp_format))
                rows += 1
    except OSError as e:
        raise ExportError(str(path), e.strerror or str(e)) from e
    except UnicodeEncodeError as e:
        raise ExportError(str(path), f"cannot encode as {encoding}: {e.reason}") from e

    logger.info("Exported %d UserAssist records to %s", rows, path)
    if emitter:
        emitter.emit(
            ScanEvent(
                type=ScanEventType.EXPORT_COMPLETED,
                message=f"Export complete: {path}",
                data={"path": str(path), "rows": rows},
            )
        )
    return rows
