"""Tests for RFID scan processing."""

from datetime import datetime
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

import pytest

from dorm_presence.application.services import RfidScanService
from dorm_presence.domain.models import (
    CardNotRecognizedError,
    Dorm,
    InvalidScanRequestError,
    Room,
    ScanAction,
    ScanEvent,
    ScanEventFilter,
    StudentNotification,
    User,
)

MANILA = ZoneInfo("Asia/Manila")


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, now: datetime) -> None:
        """Initialize with the instant to return."""
        self.current = now

    def now(self) -> datetime:
        """Return the frozen instant."""
        return self.current


class MockScanEventRepository:
    """In-memory scan log."""

    def __init__(self, events: list[ScanEvent] | None = None) -> None:
        """Initialize with existing events, newest first."""
        self.events = list(events or [])
        self.added: list[ScanEvent] = []
        self.last_filter: ScanEventFilter | None = None

    async def list_events(self, event_filter: ScanEventFilter | None = None) -> list[ScanEvent]:
        """Return events of the filtered student."""
        self.last_filter = event_filter
        if event_filter and event_filter.student_id:
            return [e for e in self.events if e.student_id == event_filter.student_id]
        return list(self.events)

    async def add_event(self, event: ScanEvent) -> ScanEvent:
        """Record the event and give it an id."""
        self.added.append(event)
        self.events.insert(0, event)
        return ScanEvent(**{**event.__dict__, "id": f"log-{len(self.added)}"})


class MockUserRepository:
    """In-memory users."""

    def __init__(self, users: list[User]) -> None:
        """Initialize with the registered users."""
        self.users = users
        self.status_updates: list[tuple[str, str, str]] = []

    async def find_by_rfid_card(self, rfid_card: str) -> User | None:
        """Find a user by card."""
        return next((u for u in self.users if u.rfid_card == rfid_card), None)

    async def update_status(self, user_id: str, status: str, updated_at: str) -> None:
        """Record the status change."""
        self.status_updates.append((user_id, status, updated_at))


class MockLocationRepository:
    """In-memory rooms and dorms."""

    def __init__(self) -> None:
        """Initialize with one dorm and one room."""
        self.rooms = {"A-101": Room(id="A-101", name="Room 101", dorm_id="dorm-acacia")}
        self.dorms = {
            "dorm-acacia": Dorm(id="dorm-acacia", name="Acacia Hall"),
            "dorm-narra": Dorm(id="dorm-narra", name="Narra Hall"),
        }

    async def get_room(self, room_id: str) -> Room | None:
        """Find a room by id."""
        return self.rooms.get(room_id)

    async def get_dorm(self, dorm_id: str) -> Dorm | None:
        """Find a dorm by id."""
        return self.dorms.get(dorm_id)

    async def find_dorm_by_name(self, name: str) -> Dorm | None:
        """Find a dorm by name."""
        return next((d for d in self.dorms.values() if d.name == name), None)


class MockNotificationRepository:
    """In-memory notifications."""

    def __init__(self) -> None:
        """Initialize empty."""
        self.notifications: list[StudentNotification] = []

    async def create_student_notification(
        self, notification: StudentNotification
    ) -> StudentNotification:
        """Record the notification."""
        self.notifications.append(notification)
        return notification

    async def list_student_notifications(self, user_id: str) -> list[StudentNotification]:
        """List notifications of a user."""
        return [n for n in self.notifications if n.user_id == user_id]


@pytest.fixture
def maria() -> User:
    """A student assigned to Acacia Hall."""
    return User(
        id="user-maria",
        first_name="Maria",
        last_name="Santos",
        student_id="2021-00123",
        rfid_card="0004512345",
        assigned_room="A-101",
        assigned_building="Acacia Hall",
        room_application_status="approved",
    )


@pytest.fixture
def scan_events() -> MockScanEventRepository:
    """Empty scan log."""
    return MockScanEventRepository()


@pytest.fixture
def users(maria: User) -> MockUserRepository:
    """Users with Maria registered."""
    return MockUserRepository([maria])


@pytest.fixture
def notifications() -> MockNotificationRepository:
    """Empty notifications."""
    return MockNotificationRepository()


@pytest.fixture
def service(
    scan_events: MockScanEventRepository,
    users: MockUserRepository,
    notifications: MockNotificationRepository,
) -> RfidScanService:
    """Scan service at 14:30:05 Manila time on 18 October 2026."""
    return RfidScanService(
        scan_event_repository=scan_events,
        user_repository=users,
        location_repository=MockLocationRepository(),
        notification_repository=notifications,
        clock=FixedClock(datetime(2026, 10, 18, 14, 30, 5, tzinfo=MANILA)),
        tz=MANILA,
        history_limit=50,
    )


class TestProcessScan:
    """Tests for recording entries and exits."""

    @pytest.mark.asyncio
    async def test_first_scan_is_an_entry(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given a student with no history, when scanning, then an entry is recorded."""
        result = await service.process_scan("0004512345", room_id="A-101")

        assert result.log_entry.action == ScanAction.ENTRY
        assert result.log_entry.id == "log-1"
        assert result.log_entry.timestamp == "2026-10-18 14:30:05"
        assert result.log_entry.student_id == "2021-00123"
        assert result.log_entry.student_name == "Maria Santos"
        assert len(scan_events.added) == 1

    @pytest.mark.asyncio
    async def test_scan_after_entry_is_an_exit(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given the student's latest event is an entry, when scanning, then an exit is recorded."""
        scan_events.events = [
            ScanEvent("2021-00123", "Maria Santos", "entry", "2026-10-18 08:00:00"),
        ]

        result = await service.process_scan("0004512345", room_id="A-101")

        assert result.log_entry.action == ScanAction.EXIT

    @pytest.mark.asyncio
    async def test_scan_after_exit_is_an_entry(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given the latest event by time is an exit, when scanning, then an entry is recorded."""
        scan_events.events = [
            ScanEvent("2021-00123", "Maria Santos", "entry", "2026-10-18 08:00:00"),
            ScanEvent("2021-00123", "Maria Santos", "exit", "2026-10-18 10:00:00"),
        ]

        result = await service.process_scan("0004512345")

        assert result.log_entry.action == ScanAction.ENTRY

    @pytest.mark.asyncio
    async def test_denied_scans_do_not_affect_next_action(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given a denied scan after an entry, when scanning, then an exit is still recorded."""
        scan_events.events = [
            ScanEvent("2021-00123", "Maria Santos", "denied", "2026-10-18 09:00:00"),
            ScanEvent("2021-00123", "Maria Santos", "entry", "2026-10-18 08:00:00"),
        ]

        result = await service.process_scan("0004512345")

        assert result.log_entry.action == ScanAction.EXIT

    @pytest.mark.asyncio
    async def test_history_is_read_for_the_student_with_configured_limit(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given a scan, when deciding the action, then the student's history is queried."""
        await service.process_scan("0004512345")

        assert scan_events.last_filter == ScanEventFilter(student_id="2021-00123", limit=50)

    @pytest.mark.asyncio
    async def test_history_failure_falls_back_to_entry(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given the history cannot be read, when scanning, then an entry is recorded."""
        scan_events.list_events = AsyncMock(side_effect=RuntimeError("store offline"))

        result = await service.process_scan("0004512345")

        assert result.log_entry.action == ScanAction.ENTRY

    @pytest.mark.asyncio
    async def test_scan_resolves_room_and_dorm(self, service: RfidScanService) -> None:
        """Given a known room, when scanning, then the room's dorm is recorded."""
        result = await service.process_scan("0004512345", room_id="A-101")

        assert result.room == Room(id="A-101", name="Room 101", dorm_id="dorm-acacia")
        assert result.log_entry.dorm_id == "dorm-acacia"
        assert result.log_entry.dorm_name == "Acacia Hall"
        assert result.log_entry.room == "A-101"

    @pytest.mark.asyncio
    async def test_scan_without_room_uses_assigned_room_and_building(
        self, service: RfidScanService
    ) -> None:
        """Given no room, when scanning, then the student's assignment is used."""
        result = await service.process_scan("0004512345")

        assert result.room is None
        assert result.log_entry.room == "A-101"
        assert result.log_entry.building == "Acacia Hall"
        assert result.log_entry.dorm_id == "dorm-acacia"
        assert result.log_entry.user_assigned_room == "A-101"
        assert result.log_entry.user_room_application_status == "approved"

    @pytest.mark.asyncio
    async def test_manager_scan_uses_managed_dorm(
        self, service: RfidScanService, users: MockUserRepository
    ) -> None:
        """Given a manager of a dorm, when scanning, then their dorm is recorded."""
        users.users.append(
            User(
                id="user-ana",
                first_name="Ana",
                last_name="Cruz",
                rfid_card="0004500001",
                role="manager",
                managed_dorm_id="dorm-narra",
            )
        )

        result = await service.process_scan("0004500001")

        assert result.log_entry.student_id == "user-ana"
        assert result.log_entry.dorm_id == "dorm-narra"
        assert result.log_entry.dorm_name == "Narra Hall"
        assert result.log_entry.room == "Unknown"

    @pytest.mark.asyncio
    async def test_scan_updates_user_status(
        self, service: RfidScanService, users: MockUserRepository
    ) -> None:
        """Given a scan, when recorded, then the user's status follows the action."""
        result = await service.process_scan("0004512345")

        assert users.status_updates == [("user-maria", "entry", "2026-10-18 14:30:05")]
        assert result.user.status == ScanAction.ENTRY

    @pytest.mark.asyncio
    async def test_scan_notifies_student(
        self, service: RfidScanService, notifications: MockNotificationRepository
    ) -> None:
        """Given a scan, when recorded, then the student receives a notification."""
        await service.process_scan("0004512345", room_id="A-101")

        assert len(notifications.notifications) == 1
        notification = notifications.notifications[0]
        assert notification.user_id == "user-maria"
        assert notification.title == "Room Entry Recorded"
        assert notification.message == "You have entered A-101 in Acacia Hall at 14:30:05."

    @pytest.mark.asyncio
    async def test_side_effect_failures_do_not_fail_the_scan(
        self,
        service: RfidScanService,
        users: MockUserRepository,
        notifications: MockNotificationRepository,
        scan_events: MockScanEventRepository,
    ) -> None:
        """Given status and notification writes fail, when scanning, then the event is kept."""
        users.update_status = AsyncMock(side_effect=RuntimeError("write failed"))
        notifications.create_student_notification = AsyncMock(side_effect=RuntimeError("down"))

        result = await service.process_scan("0004512345")

        assert result.log_entry.action == ScanAction.ENTRY
        assert len(scan_events.added) == 1

    @pytest.mark.asyncio
    async def test_card_value_is_trimmed(self, service: RfidScanService) -> None:
        """Given a card value with whitespace, when scanning, then the user is found."""
        result = await service.process_scan("  0004512345\n")

        assert result.user.id == "user-maria"


class TestRejectedScans:
    """Tests for scans that are not recorded as entries or exits."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rfid_value", [None, "", "   "])
    async def test_missing_card_value_is_rejected(
        self, service: RfidScanService, rfid_value: str | None
    ) -> None:
        """Given no card value, when scanning, then the request is rejected."""
        with pytest.raises(InvalidScanRequestError, match="RFID value is required"):
            await service.process_scan(rfid_value)

    @pytest.mark.asyncio
    async def test_unknown_card_at_room_is_logged_as_denied(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given an unknown card at a room, when scanning, then a denied event is logged."""
        with pytest.raises(CardNotRecognizedError):
            await service.process_scan("9999", room_id="A-101", user_id="reader-1")

        assert len(scan_events.added) == 1
        denied = scan_events.added[0]
        assert denied.action == ScanAction.DENIED
        assert denied.student_id == "Unknown"
        assert denied.room == "A-101"
        assert denied.user_id == "reader-1"

    @pytest.mark.asyncio
    async def test_unknown_card_without_room_is_not_logged(
        self, service: RfidScanService, scan_events: MockScanEventRepository
    ) -> None:
        """Given an unknown card with no room, when scanning, then nothing is logged."""
        with pytest.raises(CardNotRecognizedError) as exc_info:
            await service.process_scan("9999")

        assert exc_info.value.rfid_value == "9999"
        assert scan_events.added == []
