"""Scan event repository port."""

from typing import Protocol

from dorm_presence.domain.models.scan_event import ScanEvent
from dorm_presence.domain.models.scan_event_filter import ScanEventFilter


class ScanEventRepository(Protocol):
    """Port for the append-only RFID scan log (``rfidLogs``)."""

    async def list_events(self, event_filter: ScanEventFilter | None = None) -> list[ScanEvent]:
        """List scan events, newest first, limited to ``event_filter.limit``."""
        ...

    async def add_event(self, event: ScanEvent) -> ScanEvent:
        """Append a scan event and return it with its document id set."""
        ...
