"""UserAssist collection, reporting and export services."""

from userassist.services.collector import ArtifactCollector, build_record
from userassist.services.events import ScanEvent, ScanEventEmitter, ScanEventType
from userassist.services.export import EXPORT_COLUMNS, export_csv, project_record
from userassist.services.reporter import UsageReport, build_usage_report, render_usage_report
from userassist.services.scan_session import ScanHandle, ScanSession

__all__ = [
    "ArtifactCollector",
    "EXPORT_COLUMNS",
    "ScanEvent",
    "ScanEventEmitter",
    "ScanEventType",
    "ScanHandle",
    "ScanSession",
    "UsageReport",
    "build_record",
    "build_usage_report",
    "export_csv",
    "project_record",
    "render_usage_report",
]
