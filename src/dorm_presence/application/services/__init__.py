"""Application services."""

from dorm_presence.application.services.duration_formatter import format_duration
from dorm_presence.application.services.presence_reconciler import PresenceReconciler
from dorm_presence.application.services.rfid_scan_service import RfidScanService
from dorm_presence.application.services.scan_log_service import ScanLogService
from dorm_presence.application.services.timestamp_parser import parse_timestamp

__all__ = [
    "PresenceReconciler",
    "RfidScanService",
    "ScanLogService",
    "format_duration",
    "parse_timestamp",
]
