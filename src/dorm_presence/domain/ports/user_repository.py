"""User repository port."""

from typing import Protocol

from dorm_presence.domain.models.user import User


class UserRepository(Protocol):
    """Port for reading users and recording their RFID status."""

    async def find_by_rfid_card(self, rfid_card: str) -> User | None:
        """Find the user registered for an RFID card."""
        ...

    async def update_status(self, user_id: str, status: str, updated_at: str) -> None:
        """Set the user's status to their latest RFID action."""
        ...
