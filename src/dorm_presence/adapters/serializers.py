"""JSON representations of domain objects, shared by the HTTP API and the CLI."""

from typing import Any

from dorm_presence.domain.models import (
    AnnotatedScanEvent,
    FilterOptions,
    PresenceRecord,
    PresenceSnapshot,
    Room,
    ScanEvent,
    ScanResult,
    StudentNotification,
    User,
)


def scan_event_to_json(event: ScanEvent) -> dict[str, Any]:
    """Serialize a scan event using the log's camelCase field names."""
    data: dict[str, Any] = {
        "id": event.id,
        "studentId": event.student_id,
        "studentName": event.student_name,
        "action": str(event.action),
        "timestamp": event.timestamp,
        "room": event.room,
        "building": event.building,
        "dormId": event.dorm_id,
        "dormName": event.dorm_name,
        "userId": event.user_id,
        "userAssignedRoom": event.user_assigned_room,
        "userAssignedBuilding": event.user_assigned_building,
        "userRoomApplicationStatus": event.user_room_application_status,
    }
    if isinstance(event, AnnotatedScanEvent):
        data["duration"] = event.duration
        data["status"] = str(event.session_status)
        data["timestampWasInvalid"] = event.timestamp_was_invalid
        data["durationWasEstimated"] = event.duration_was_estimated
    return data


def presence_record_to_json(record: PresenceRecord) -> dict[str, Any]:
    """Serialize a presence record with its last event."""
    return {
        "studentId": record.student_id,
        "studentName": record.last_event.student_name,
        "currentlyPresent": record.currently_present,
        "lastEvent": scan_event_to_json(record.last_event),
    }


def presence_snapshot_to_json(snapshot: PresenceSnapshot) -> dict[str, Any]:
    """Serialize the "currently in" and "currently out" rosters."""
    return {
        "present": [presence_record_to_json(r) for r in snapshot.present],
        "out": [presence_record_to_json(r) for r in snapshot.out],
        "presentCount": snapshot.present_count,
        "outCount": snapshot.out_count,
    }


def user_to_json(user: User) -> dict[str, Any]:
    """Serialize the user fields returned to the scanning client."""
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "studentId": user.student_id,
        "rfidCard": user.rfid_card,
        "role": user.role,
        "status": user.status,
    }


def room_to_json(room: Room | None) -> dict[str, Any] | None:
    """Serialize a room, or None if the scan had no known room."""
    if room is None:
        return None
    return {"id": room.id, "name": room.name, "dormId": room.dorm_id}


def scan_result_to_json(result: ScanResult) -> dict[str, Any]:
    """Serialize the response of a successful scan."""
    return {
        "success": True,
        "user": user_to_json(result.user),
        "room": room_to_json(result.room),
        "logEntry": scan_event_to_json(result.log_entry),
    }


def notification_to_json(notification: StudentNotification) -> dict[str, Any]:
    """Serialize a student notification."""
    return {
        "id": notification.id,
        "userId": notification.user_id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "read": notification.read,
        "timestamp": notification.timestamp,
    }


def filter_options_to_json(options: FilterOptions) -> dict[str, Any]:
    """Serialize the log filter choices."""
    return {"buildings": options.buildings, "rooms": options.rooms}
