"""Scan log reader port."""

from typing import Protocol

from dorm_presence.domain.models.filter_options import FilterOptions
from dorm_presence.domain.models.presence import PresenceSnapshot
from dorm_presence.domain.models.scan_event import AnnotatedScanEvent
from dorm_presence.domain.models.scan_event_filter import ScanEventFilter


class ScanLogReader(Protocol):
    """Port for reading the scan log with derived durations and presence."""

    async def list_logs(
        self, event_filter: ScanEventFilter | None = None, search: str | None = None
    ) -> list[AnnotatedScanEvent]:
        """List recent scan events with stay durations, newest first."""
        ...

    async def presence(self, event_filter: ScanEventFilter | None = None) -> PresenceSnapshot:
        """Get the students currently inside and currently out."""
        ...

    async def filter_options(
        self, event_filter: ScanEventFilter | None = None, building: str | None = None
    ) -> FilterOptions:
        """List the buildings and rooms seen in recent events."""
        ...
