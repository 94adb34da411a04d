"""Scan processor port."""

from typing import Protocol

from dorm_presence.domain.models.scan_result import ScanResult


class ScanProcessor(Protocol):
    """Port for recording RFID card scans."""

    async def process_scan(
        self, rfid_value: str | None, room_id: str | None = None, user_id: str | None = None
    ) -> ScanResult:
        """Record a scan of an RFID card.

        Resolves the card to a user, toggles the user's entry/exit state and
        appends one event to the scan log. Existing events are never changed.

        Args:
            rfid_value: Raw value read from the card.
            room_id: Room the reader is installed in, if known.
            user_id: Id of the account that submitted the scan, if any.

        Returns:
            ScanResult with the user, the room and the new event.
        """
        ...
