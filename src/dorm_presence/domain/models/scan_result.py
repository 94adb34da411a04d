"""Scan result domain model."""

from pydantic import BaseModel, ConfigDict

from dorm_presence.domain.models.location import Room
from dorm_presence.domain.models.scan_event import ScanEvent
from dorm_presence.domain.models.user import User


class ScanResult(BaseModel):
    """Outcome of a processed RFID scan.

    Contains the resolved user (with the updated status), the scanned room
    if it was found, and the new log entry.
    """

    model_config = ConfigDict(frozen=True)

    user: User
    room: Room | None = None
    log_entry: ScanEvent
