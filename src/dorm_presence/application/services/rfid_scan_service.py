"""RFID scan processing service."""

import logging
from dataclasses import replace
from datetime import tzinfo

from dorm_presence.application.services.presence_reconciler import PresenceReconciler
from dorm_presence.application.services.timestamp_parser import format_timestamp
from dorm_presence.domain.contracts.clock import Clock
from dorm_presence.domain.models.errors import CardNotRecognizedError, InvalidScanRequestError
from dorm_presence.domain.models.location import Room
from dorm_presence.domain.models.notification import StudentNotification
from dorm_presence.domain.models.scan_action import ScanAction
from dorm_presence.domain.models.scan_event import UNKNOWN_STUDENT_ID, ScanEvent
from dorm_presence.domain.models.scan_event_filter import ScanEventFilter
from dorm_presence.domain.models.scan_result import ScanResult
from dorm_presence.domain.models.user import User
from dorm_presence.domain.ports.location_repository import LocationRepository
from dorm_presence.domain.ports.notification_repository import NotificationRepository
from dorm_presence.domain.ports.scan_event_repository import ScanEventRepository
from dorm_presence.domain.ports.user_repository import UserRepository

logger = logging.getLogger(__name__)


class RfidScanService:
    """Turns a raw card scan into a new entry or exit in the scan log."""

    def __init__(
        self,
        scan_event_repository: ScanEventRepository,
        user_repository: UserRepository,
        location_repository: LocationRepository,
        notification_repository: NotificationRepository,
        clock: Clock,
        tz: tzinfo,
        history_limit: int = 100,
    ) -> None:
        """Initialize with repositories and the dormitory's clock.

        Args:
            scan_event_repository: The append-only scan log.
            user_repository: Users and their RFID cards.
            location_repository: Rooms and dormitories.
            notification_repository: Where student notifications are stored.
            clock: Source of scan times.
            tz: Timezone of the wall-clock timestamps written to the log.
            history_limit: How many of the student's latest events are read
                to determine the next action.
        """
        self._scan_events = scan_event_repository
        self._users = user_repository
        self._locations = location_repository
        self._notifications = notification_repository
        self._clock = clock
        self._tz = tz
        self._history_limit = history_limit
        self._reconciler = PresenceReconciler(clock, tz)

    async def process_scan(
        self, rfid_value: str | None, room_id: str | None = None, user_id: str | None = None
    ) -> ScanResult:
        """Record a scan of an RFID card.

        Args:
            rfid_value: Raw value read from the card.
            room_id: Room the reader is installed in, if known.
            user_id: Id of the account that submitted the scan, if any.

        Returns:
            ScanResult with the user (status updated), the room and the new event.

        Raises:
            InvalidScanRequestError: If no card value was given.
            CardNotRecognizedError: If no user is registered for the card.
        """
        rfid_value = (rfid_value or "").strip()
        if not rfid_value:
            raise InvalidScanRequestError("RFID value is required")
        room_id = (room_id or "").strip() or None
        user_id = (user_id or "").strip() or None

        user = await self._users.find_by_rfid_card(rfid_value)
        if user is None:
            await self._record_denied_scan(room_id, user_id)
            raise CardNotRecognizedError(rfid_value)

        student_id = user.student_id or user.id
        room, dorm_id, dorm_name = await self._resolve_location(user, room_id)
        action = await self._next_action(student_id)

        timestamp = format_timestamp(self._clock.now(), self._tz)
        log_entry = await self._scan_events.add_event(
            ScanEvent(
                student_id=student_id,
                student_name=user.full_name,
                action=action,
                timestamp=timestamp,
                room=room_id or user.assigned_room or "Unknown",
                building=user.assigned_building,
                dorm_id=dorm_id or user.managed_dorm_id,
                dorm_name=dorm_name or user.assigned_building,
                user_id=user_id or user.id,
                user_assigned_room=user.assigned_room,
                user_assigned_building=user.assigned_building,
                user_room_application_status=user.room_application_status,
            )
        )
        logger.info(f"Recorded {action} for student {student_id} in room {log_entry.room}")

        await self._update_user_status(user, action, timestamp)
        await self._notify_student(user, action, log_entry)

        return ScanResult(
            user=replace(user, status=action),
            room=room,
            log_entry=log_entry,
        )

    async def _record_denied_scan(self, room_id: str | None, user_id: str | None) -> None:
        """Log an access-denied event for an unknown card scanned at a room."""
        if room_id is None:
            return
        await self._scan_events.add_event(
            ScanEvent(
                student_id=UNKNOWN_STUDENT_ID,
                student_name=UNKNOWN_STUDENT_ID,
                action=ScanAction.DENIED,
                timestamp=format_timestamp(self._clock.now(), self._tz),
                room=room_id,
                user_id=user_id,
            )
        )
        logger.warning(f"Access denied for unknown RFID card at room {room_id}")

    async def _resolve_location(
        self, user: User, room_id: str | None
    ) -> tuple[Room | None, str | None, str | None]:
        """Find the scanned room and the dormitory the scan belongs to.

        The room's dormitory is used first, then the dormitory named by the
        user's assigned building. A manager's own dormitory always wins.
        """
        room: Room | None = None
        dorm_id: str | None = None
        dorm_name: str | None = None

        if room_id:
            room = await self._locations.get_room(room_id)
            if room is not None and room.dorm_id:
                dorm_id = room.dorm_id
                dorm = await self._locations.get_dorm(dorm_id)
                dorm_name = dorm.name if dorm else None

        if dorm_id is None and user.assigned_building:
            dorm = await self._locations.find_dorm_by_name(user.assigned_building)
            if dorm is not None:
                dorm_id = dorm.id
                dorm_name = user.assigned_building

        if user.managed_dorm_id:
            dorm_id = user.managed_dorm_id
            if not dorm_name:
                dorm = await self._locations.get_dorm(dorm_id)
                dorm_name = dorm.name if dorm else None

        return room, dorm_id, dorm_name

    async def _next_action(self, student_id: str) -> ScanAction:
        """Toggle the student's latest entry/exit; start with an entry."""
        try:
            history = await self._scan_events.list_events(
                ScanEventFilter(student_id=student_id, limit=self._history_limit)
            )
        except Exception:
            logger.exception(f"Error reading scan history for student {student_id}")
            return ScanAction.ENTRY

        records = self._reconciler.classify_presence(
            [event for event in history if event.action in (ScanAction.ENTRY, ScanAction.EXIT)]
        )
        if not records:
            return ScanAction.ENTRY
        return ScanAction.EXIT if records[0].currently_present else ScanAction.ENTRY

    async def _update_user_status(self, user: User, action: str, timestamp: str) -> None:
        try:
            await self._users.update_status(user.id, action, timestamp)
        except Exception:
            logger.exception(f"Error updating status of user {user.id} to {action}")

    async def _notify_student(self, user: User, action: str, log_entry: ScanEvent) -> None:
        """Tell the student their entry or exit was recorded."""
        room_name = log_entry.room or "Unknown"
        building_name = user.assigned_building or "Unknown Building"
        local_time = self._clock.now().astimezone(self._tz).strftime("%H:%M:%S")
        verb = "entered" if action == ScanAction.ENTRY else "exited"
        try:
            await self._notifications.create_student_notification(
                StudentNotification(
                    user_id=user.id,
                    title=f"Room {'Entry' if action == ScanAction.ENTRY else 'Exit'} Recorded",
                    message=f"You have {verb} {room_name} in {building_name} at {local_time}.",
                    timestamp=log_entry.timestamp,
                )
            )
        except Exception:
            logger.exception(f"Error sending RFID notification to user {user.id}")
