"""Scan action domain model."""

from enum import StrEnum


class ScanAction(StrEnum):
    """Action recorded for a single RFID scan."""

    ENTRY = "entry"
    EXIT = "exit"
    DENIED = "denied"


class SessionStatus(StrEnum):
    """Status of the stay an event belongs to, as shown in the log table."""

    ACTIVE = "active"
    COMPLETED = "completed"
