"""Port implementations backed by the document store."""

import logging
from typing import Any

from dorm_presence.adapters.storage.document_store import (
    DORMS,
    RFID_LOGS,
    ROOMS,
    STUDENT_NOTIFICATIONS,
    USERS,
    DocumentStore,
)
from dorm_presence.domain.models import (
    Dorm,
    Room,
    ScanEvent,
    ScanEventFilter,
    StudentNotification,
    User,
)

logger = logging.getLogger(__name__)

# Document field -> ScanEvent attribute
_SCAN_EVENT_FIELDS = {
    "studentId": "student_id",
    "studentName": "student_name",
    "action": "action",
    "timestamp": "timestamp",
    "room": "room",
    "building": "building",
    "dormId": "dorm_id",
    "dormName": "dorm_name",
    "userId": "user_id",
    "userAssignedRoom": "user_assigned_room",
    "userAssignedBuilding": "user_assigned_building",
    "userRoomApplicationStatus": "user_room_application_status",
}


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def scan_event_from_document(document: dict[str, Any]) -> ScanEvent:
    """Build a ScanEvent from an ``rfidLogs`` document.

    Timestamps that are not strings are dropped so they are treated as
    invalid by the reconciler instead of failing here.
    """
    timestamp = document.get("timestamp")
    return ScanEvent(
        id=_optional_str(document.get("id")),
        student_id=_optional_str(document.get("studentId")),
        student_name=str(document.get("studentName") or ""),
        action=str(document.get("action") or ""),
        timestamp=timestamp if isinstance(timestamp, str) else None,
        room=_optional_str(document.get("room")),
        building=_optional_str(document.get("building")),
        dorm_id=_optional_str(document.get("dormId")),
        dorm_name=_optional_str(document.get("dormName")),
        user_id=_optional_str(document.get("userId")),
        user_assigned_room=_optional_str(document.get("userAssignedRoom")),
        user_assigned_building=_optional_str(document.get("userAssignedBuilding")),
        user_room_application_status=_optional_str(document.get("userRoomApplicationStatus")),
    )


def scan_event_to_document(event: ScanEvent) -> dict[str, Any]:
    """Build an ``rfidLogs`` document from a ScanEvent."""
    return {field: getattr(event, attribute) for field, attribute in _SCAN_EVENT_FIELDS.items()}


def user_from_document(document: dict[str, Any]) -> User:
    """Build a User from a ``users`` document."""
    return User(
        id=str(document["id"]),
        first_name=str(document.get("firstName") or ""),
        last_name=str(document.get("lastName") or ""),
        email=_optional_str(document.get("email")),
        student_id=_optional_str(document.get("studentId")),
        rfid_card=_optional_str(document.get("rfidCard")),
        role=str(document.get("role") or "student"),
        status=_optional_str(document.get("status")),
        assigned_room=_optional_str(document.get("assignedRoom")),
        assigned_building=_optional_str(document.get("assignedBuilding")),
        managed_dorm_id=_optional_str(document.get("managedDormId")),
        room_application_status=_optional_str(document.get("roomApplicationStatus")),
    )


class DocumentScanEventRepository:
    """Scan log stored in the ``rfidLogs`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        """Initialize with the document store."""
        self._store = store

    async def list_events(self, event_filter: ScanEventFilter | None = None) -> list[ScanEvent]:
        """List scan events, newest first, limited to ``event_filter.limit``.

        Well-formed wall-clock timestamps sort correctly as text; events
        without a string timestamp sort last.
        """
        event_filter = event_filter or ScanEventFilter()
        conditions: dict[str, Any] = {}
        if event_filter.student_id:
            conditions["studentId"] = event_filter.student_id
        if event_filter.room:
            conditions["room"] = event_filter.room
        if event_filter.action:
            conditions["action"] = event_filter.action

        documents = await self._store.query(RFID_LOGS, **conditions)
        if event_filter.dorm_name:
            documents = [
                d
                for d in documents
                if event_filter.dorm_name in (d.get("dormName"), d.get("building"))
            ]

        documents.sort(
            key=lambda d: d["timestamp"] if isinstance(d.get("timestamp"), str) else "",
            reverse=True,
        )
        events = [scan_event_from_document(d) for d in documents[: event_filter.limit]]
        logger.debug(f"Retrieved {len(events)} RFID logs for filter {conditions}")
        return events

    async def add_event(self, event: ScanEvent) -> ScanEvent:
        """Append a scan event and return it with its document id set."""
        doc_id = await self._store.add(RFID_LOGS, scan_event_to_document(event))
        return scan_event_from_document({**scan_event_to_document(event), "id": doc_id})


class DocumentUserRepository:
    """Users stored in the ``users`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        """Initialize with the document store."""
        self._store = store

    async def find_by_rfid_card(self, rfid_card: str) -> User | None:
        """Find the user registered for an RFID card."""
        documents = await self._store.query(USERS, rfidCard=rfid_card)
        if len(documents) > 1:
            logger.warning(f"RFID card {rfid_card} is registered to {len(documents)} users")
        return user_from_document(documents[0]) if documents else None

    async def update_status(self, user_id: str, status: str, updated_at: str) -> None:
        """Set the user's status to their latest RFID action."""
        await self._store.update(USERS, user_id, {"status": str(status), "lastUpdated": updated_at})
        logger.info(f"User {user_id} status updated to {status}")


class DocumentLocationRepository:
    """Rooms and dormitories stored in the ``rooms`` and ``dorms`` collections."""

    def __init__(self, store: DocumentStore) -> None:
        """Initialize with the document store."""
        self._store = store

    async def get_room(self, room_id: str) -> Room | None:
        """Get a room by document id or by its ``id`` field."""
        document = await self._find(ROOMS, room_id)
        if document is None:
            return None
        return Room(
            id=str(document["id"]),
            name=str(document.get("name") or document["id"]),
            dorm_id=_optional_str(document.get("dormId")),
        )

    async def get_dorm(self, dorm_id: str) -> Dorm | None:
        """Get a dormitory by document id or by its ``id`` field."""
        document = await self._find(DORMS, dorm_id)
        if document is None:
            return None
        return Dorm(id=str(document["id"]), name=str(document.get("name") or ""))

    async def find_dorm_by_name(self, name: str) -> Dorm | None:
        """Find a dormitory by its display name."""
        documents = await self._store.query(DORMS, name=name)
        if not documents:
            return None
        return Dorm(id=str(documents[0]["id"]), name=name)

    async def _find(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        document = await self._store.get(collection, doc_id)
        if document is not None:
            return document
        # Older documents carry their id as a field rather than as the key
        matches = await self._store.query(collection, id=doc_id)
        return matches[0] if matches else None


class DocumentNotificationRepository:
    """Student notifications stored in the ``studentNotifications`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        """Initialize with the document store."""
        self._store = store

    async def create_student_notification(
        self, notification: StudentNotification
    ) -> StudentNotification:
        """Store a notification and return it with its id set."""
        doc_id = await self._store.add(
            STUDENT_NOTIFICATIONS,
            {
                "userId": notification.user_id,
                "title": notification.title,
                "message": notification.message,
                "type": notification.type,
                "read": notification.read,
                "timestamp": notification.timestamp,
            },
        )
        return StudentNotification(
            id=doc_id,
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            read=notification.read,
            timestamp=notification.timestamp,
        )

    async def list_student_notifications(self, user_id: str) -> list[StudentNotification]:
        """List a student's notifications, newest first."""
        documents = await self._store.query(STUDENT_NOTIFICATIONS, userId=user_id)
        documents.sort(key=lambda d: str(d.get("timestamp") or ""), reverse=True)
        return [
            StudentNotification(
                id=str(d["id"]),
                user_id=user_id,
                title=str(d.get("title") or ""),
                message=str(d.get("message") or ""),
                type=str(d.get("type") or "info"),
                read=bool(d.get("read", False)),
                timestamp=_optional_str(d.get("timestamp")),
            )
            for d in documents
        ]
