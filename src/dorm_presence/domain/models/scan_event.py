"""Scan event domain models."""

from dataclasses import dataclass, fields

from dorm_presence.domain.models.scan_action import SessionStatus

# Written as the student id of denied scans for unknown cards
UNKNOWN_STUDENT_ID = "Unknown"


@dataclass(frozen=True)
class ScanEvent:
    """A single recorded RFID scan.

    Events are append-only: once written they are never updated or deleted.
    The action and timestamp are kept as raw strings so malformed records
    can still be represented and reconciled.
    """

    student_id: str | None
    student_name: str
    action: str
    timestamp: str | None
    room: str | None = None
    building: str | None = None
    dorm_id: str | None = None
    dorm_name: str | None = None
    id: str | None = None  # Document id, set when read from the store
    user_id: str | None = None
    user_assigned_room: str | None = None
    user_assigned_building: str | None = None
    user_room_application_status: str | None = None

    @property
    def has_student_id(self) -> bool:
        """Whether the event can be attributed to a student."""
        return bool(self.student_id) and self.student_id != UNKNOWN_STUDENT_ID


@dataclass(frozen=True)
class AnnotatedScanEvent(ScanEvent):
    """Scan event with derived stay information. Recomputed on every read."""

    duration: str = "-"
    session_status: SessionStatus = SessionStatus.ACTIVE
    timestamp_was_invalid: bool = False  # Own timestamp replaced by a fallback instant
    duration_was_estimated: bool = False  # Duration computed from a fallback instant

    @classmethod
    def from_event(
        cls,
        event: ScanEvent,
        duration: str = "-",
        session_status: SessionStatus = SessionStatus.ACTIVE,
        timestamp_was_invalid: bool = False,
        duration_was_estimated: bool = False,
    ) -> "AnnotatedScanEvent":
        """Copy a scan event and attach the derived fields."""
        base = {f.name: getattr(event, f.name) for f in fields(ScanEvent)}
        return cls(
            **base,
            duration=duration,
            session_status=session_status,
            timestamp_was_invalid=timestamp_was_invalid,
            duration_was_estimated=duration_was_estimated,
        )
