"""User domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """A dormitory user as stored in the ``users`` collection."""

    id: str
    first_name: str
    last_name: str
    email: str | None = None
    student_id: str | None = None
    rfid_card: str | None = None
    role: str = "student"
    status: str | None = None  # Last RFID action ("entry" or "exit")
    assigned_room: str | None = None
    assigned_building: str | None = None
    managed_dorm_id: str | None = None
    room_application_status: str | None = None

    @property
    def full_name(self) -> str:
        """Display name used on log entries."""
        return f"{self.first_name} {self.last_name}"
