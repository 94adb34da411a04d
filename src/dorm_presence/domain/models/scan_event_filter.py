"""Scan event query filter domain model."""

from pydantic import BaseModel, ConfigDict, Field


class ScanEventFilter(BaseModel):
    """Filter for listing scan events.

    Equality filters are combined with AND. ``dorm_name`` matches either the
    event's dorm name or its building.
    """

    model_config = ConfigDict(frozen=True)

    student_id: str | None = None
    action: str | None = None
    room: str | None = None
    dorm_name: str | None = None
    limit: int = Field(default=100, gt=0)
