"""Domain layer - core business logic and models."""

from dorm_presence.domain.models import (
    AnnotatedScanEvent,
    PresenceRecord,
    ScanAction,
    ScanEvent,
)
from dorm_presence.domain.ports import (
    LocationRepository,
    NotificationRepository,
    ScanEventRepository,
    UserRepository,
)

__all__ = [
    "AnnotatedScanEvent",
    "LocationRepository",
    "NotificationRepository",
    "PresenceRecord",
    "ScanAction",
    "ScanEvent",
    "ScanEventRepository",
    "UserRepository",
]
