"""Student notification domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StudentNotification:
    """A notification shown to a student."""

    user_id: str
    title: str
    message: str
    type: str = "info"  # "success", "warning" or "info"
    read: bool = False
    timestamp: str | None = None
    id: str | None = None
