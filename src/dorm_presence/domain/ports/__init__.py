"""Ports (interfaces) for the ports-and-adapters architecture."""

from dorm_presence.domain.ports.location_repository import LocationRepository
from dorm_presence.domain.ports.notification_repository import NotificationRepository
from dorm_presence.domain.ports.scan_event_repository import ScanEventRepository
from dorm_presence.domain.ports.scan_log_reader import ScanLogReader
from dorm_presence.domain.ports.scan_processor import ScanProcessor
from dorm_presence.domain.ports.user_repository import UserRepository

__all__ = [
    "LocationRepository",
    "NotificationRepository",
    "ScanEventRepository",
    "ScanLogReader",
    "ScanProcessor",
    "UserRepository",
]
