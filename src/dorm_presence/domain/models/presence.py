"""Presence domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from dorm_presence.domain.models.scan_event import AnnotatedScanEvent


@dataclass(frozen=True)
class PresenceRecord:
    """Current presence state of one student, derived from their latest event."""

    student_id: str
    last_event: AnnotatedScanEvent
    currently_present: bool


class PresenceSnapshot(BaseModel):
    """Students currently inside and currently out, from one classification pass."""

    model_config = ConfigDict(frozen=True)

    present: list[PresenceRecord]
    out: list[PresenceRecord]

    @property
    def present_count(self) -> int:
        """Number of students currently inside."""
        return len(self.present)

    @property
    def out_count(self) -> int:
        """Number of students currently out."""
        return len(self.out)
