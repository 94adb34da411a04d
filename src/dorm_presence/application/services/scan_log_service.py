"""Scan log querying service."""

import logging
from collections.abc import Iterable

from dorm_presence.application.services.presence_reconciler import PresenceReconciler
from dorm_presence.domain.models.filter_options import FilterOptions
from dorm_presence.domain.models.presence import PresenceSnapshot
from dorm_presence.domain.models.scan_event import AnnotatedScanEvent, ScanEvent
from dorm_presence.domain.models.scan_event_filter import ScanEventFilter
from dorm_presence.domain.ports.scan_event_repository import ScanEventRepository

logger = logging.getLogger(__name__)


class ScanLogService:
    """Service backing the admin and manager RFID log views."""

    def __init__(
        self, scan_event_repository: ScanEventRepository, reconciler: PresenceReconciler
    ) -> None:
        """Initialize with the scan log and a reconciler."""
        self._scan_events = scan_event_repository
        self._reconciler = reconciler

    async def list_logs(
        self, event_filter: ScanEventFilter | None = None, search: str | None = None
    ) -> list[AnnotatedScanEvent]:
        """List recent scan events with stay durations, newest first.

        Durations are computed over the whole fetched window before the
        search term is applied, so an exit keeps its duration even when the
        matching entry does not match the search.

        Args:
            event_filter: Equality filters and the size of the window.
            search: Case-insensitive text matched against student id, name and room.

        Returns:
            Annotated events matching the filter and search term.
        """
        events = await self._scan_events.list_events(event_filter)
        annotated = self._reconciler.annotate(events)
        if search and search.strip():
            annotated = [event for event in annotated if matches_search(event, search)]
        logger.debug(f"Listing {len(annotated)} of {len(events)} fetched scan events")
        return annotated

    async def presence(self, event_filter: ScanEventFilter | None = None) -> PresenceSnapshot:
        """Get the students currently inside and currently out."""
        events = await self._scan_events.list_events(event_filter)
        return self._reconciler.snapshot(events)

    async def filter_options(
        self, event_filter: ScanEventFilter | None = None, building: str | None = None
    ) -> FilterOptions:
        """List the buildings and rooms seen in recent events.

        Args:
            event_filter: Equality filters and the size of the window.
            building: Only list rooms of this building; ``"all"`` or None for every building.
        """
        events = await self._scan_events.list_events(event_filter)
        return FilterOptions(
            buildings=distinct_buildings(events), rooms=distinct_rooms(events, building)
        )


def matches_search(event: ScanEvent, search: str) -> bool:
    """Check whether the student id, student name or room contains the search term."""
    term = search.strip().lower()
    return any(
        term in (value or "").lower() for value in (event.student_id, event.student_name, event.room)
    )


def distinct_buildings(events: Iterable[ScanEvent]) -> list[str]:
    """Buildings seen in the events, for filter choices.

    Building names like ``"Acacia Hall - Wing B"`` are reduced to the part
    before ``" - "``. Order of first appearance is kept.
    """
    buildings: dict[str, None] = {}
    for event in events:
        building = (event.user_assigned_building or event.building or "").strip()
        if building:
            buildings[building.split(" - ")[0]] = None
    return list(buildings)


def distinct_rooms(events: Iterable[ScanEvent], building: str | None = None) -> list[str]:
    """Rooms seen in the events, optionally only those in one building."""
    rooms: dict[str, None] = {}
    for event in events:
        room = (event.user_assigned_room or event.room or "").strip()
        if not room:
            continue
        event_building = (event.user_assigned_building or event.building or "").split(" - ")[0]
        if building and building != "all" and event_building != building:
            continue
        rooms[room] = None
    return list(rooms)
