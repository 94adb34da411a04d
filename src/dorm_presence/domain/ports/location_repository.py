"""Location repository port."""

from typing import Protocol

from dorm_presence.domain.models.location import Dorm, Room


class LocationRepository(Protocol):
    """Port for looking up rooms and dormitories."""

    async def get_room(self, room_id: str) -> Room | None:
        """Get a room by its id."""
        ...

    async def get_dorm(self, dorm_id: str) -> Dorm | None:
        """Get a dormitory by its id."""
        ...

    async def find_dorm_by_name(self, name: str) -> Dorm | None:
        """Find a dormitory by its display name."""
        ...
