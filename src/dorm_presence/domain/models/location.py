"""Room and dormitory domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Dorm:
    """A dormitory building."""

    id: str
    name: str


@dataclass(frozen=True)
class Room:
    """A room inside a dormitory."""

    id: str
    name: str
    dorm_id: str | None = None
