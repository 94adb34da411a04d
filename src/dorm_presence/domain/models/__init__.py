"""Domain models for dormitory presence tracking."""

from dorm_presence.domain.models.errors import (
    CardNotRecognizedError,
    DormPresenceError,
    InvalidScanRequestError,
)
from dorm_presence.domain.models.filter_options import FilterOptions
from dorm_presence.domain.models.location import Dorm, Room
from dorm_presence.domain.models.notification import StudentNotification
from dorm_presence.domain.models.presence import PresenceRecord, PresenceSnapshot
from dorm_presence.domain.models.scan_action import ScanAction, SessionStatus
from dorm_presence.domain.models.scan_event import (
    UNKNOWN_STUDENT_ID,
    AnnotatedScanEvent,
    ScanEvent,
)
from dorm_presence.domain.models.scan_event_filter import ScanEventFilter
from dorm_presence.domain.models.scan_result import ScanResult
from dorm_presence.domain.models.user import User

__all__ = [
    "UNKNOWN_STUDENT_ID",
    "AnnotatedScanEvent",
    "CardNotRecognizedError",
    "Dorm",
    "DormPresenceError",
    "FilterOptions",
    "InvalidScanRequestError",
    "PresenceRecord",
    "PresenceSnapshot",
    "Room",
    "ScanAction",
    "ScanEvent",
    "ScanEventFilter",
    "ScanResult",
    "SessionStatus",
    "StudentNotification",
    "User",
]
