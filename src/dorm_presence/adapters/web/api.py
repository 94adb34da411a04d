"""Starlette HTTP API for RFID scans, scan logs and presence rosters."""

from __future__ import annotations

import json
import logging
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from dorm_presence.adapters.config import AppConfig
from dorm_presence.adapters.serializers import (
    filter_options_to_json,
    notification_to_json,
    presence_snapshot_to_json,
    scan_event_to_json,
    scan_result_to_json,
)
from dorm_presence.domain.models import (
    CardNotRecognizedError,
    InvalidScanRequestError,
    ScanEventFilter,
)
from dorm_presence.domain.ports import NotificationRepository, ScanLogReader, ScanProcessor

from .rate_limit_middleware import RateLimitMiddleware

logger = logging.getLogger(__name__)


class InvalidQueryError(ValueError):
    """A query parameter could not be parsed."""


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _optional_param(request: Request, name: str) -> str | None:
    value = request.query_params.get(name, "").strip()
    return value or None


def _limit_param(request: Request, default: int) -> int:
    raw = request.query_params.get("limit")
    if raw is None or raw.strip() == "":
        return default
    try:
        limit = int(raw)
    except ValueError as e:
        raise InvalidQueryError("limit must be an integer") from e
    if limit <= 0:
        raise InvalidQueryError("limit must be positive")
    return limit


def build_event_filter(request: Request, default_limit: int) -> ScanEventFilter:
    """Build a scan event filter from query parameters.

    ``all`` is accepted for ``action`` and ``room`` and means no filter.

    Raises:
        InvalidQueryError: If ``limit`` is not a positive integer.
    """
    action = _optional_param(request, "action")
    room = _optional_param(request, "room")
    return ScanEventFilter(
        student_id=_optional_param(request, "studentId"),
        action=None if action == "all" else action,
        room=None if room == "all" else room,
        dorm_name=_optional_param(request, "dormName"),
        limit=_limit_param(request, default_limit),
    )


def build_roster_filter(request: Request, default_limit: int) -> ScanEventFilter:
    """Build the filter for views derived from each student's latest event.

    Only ``studentId``, ``dormName`` and ``limit`` apply, so each student's
    latest event is always among the fetched events.

    Raises:
        InvalidQueryError: If ``limit`` is not a positive integer.
    """
    return ScanEventFilter(
        student_id=_optional_param(request, "studentId"),
        dorm_name=_optional_param(request, "dormName"),
        limit=_limit_param(request, default_limit),
    )


class DormPresenceApi:
    """HTTP handlers for the dormitory presence endpoints."""

    def __init__(
        self,
        scan_processor: ScanProcessor,
        scan_log_reader: ScanLogReader,
        notification_repository: NotificationRepository,
        config: AppConfig,
    ) -> None:
        """Initialize the API.

        Args:
            scan_processor: Records RFID scans.
            scan_log_reader: Reads annotated scan logs and presence.
            notification_repository: Reads student notifications.
            config: Application configuration.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")
        if not callable(getattr(scan_processor, "process_scan", None)):
            raise TypeError("scan_processor must implement ScanProcessor protocol")
        if not callable(getattr(scan_log_reader, "list_logs", None)):
            raise TypeError("scan_log_reader must implement ScanLogReader protocol")

        self.scan_processor = scan_processor
        self.scan_log_reader = scan_log_reader
        self.notification_repository = notification_repository
        self.config = config

    def routes(self) -> list[Route]:
        """Routes served by the API."""
        return [
            Route("/api/rfid", self.process_rfid_scan, methods=["POST"]),
            Route("/api/rfid-logs", self.list_rfid_logs, methods=["GET"]),
            Route("/api/rfid-logs/options", self.get_filter_options, methods=["GET"]),
            Route("/api/presence", self.get_presence, methods=["GET"]),
            Route("/api/notifications", self.list_notifications, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
        ]

    async def process_rfid_scan(self, request: Request) -> Response:
        """Record a card scan sent by a reader or the log pages."""
        try:
            data = await request.json()
        except json.JSONDecodeError:
            return _error("Request body must be JSON", 400)
        if not isinstance(data, dict):
            return _error("Request body must be a JSON object", 400)

        try:
            result = await self.scan_processor.process_scan(
                _as_optional_str(data.get("rfidValue")),
                room_id=_as_optional_str(data.get("roomId")),
                user_id=_as_optional_str(data.get("userId")),
            )
        except InvalidScanRequestError as e:
            return _error(str(e), 400)
        except CardNotRecognizedError:
            return _error("No user found with this RFID card", 404, success=False)
        except Exception:
            logger.exception("Error processing RFID request")
            return _error("Internal server error", 500, success=False)

        return JSONResponse(scan_result_to_json(result))

    async def list_rfid_logs(self, request: Request) -> Response:
        """List recent scan events with durations."""
        try:
            event_filter = build_event_filter(request, self.config.log_limit)
        except InvalidQueryError as e:
            return _error(str(e), 400)

        try:
            logs = await self.scan_log_reader.list_logs(
                event_filter, search=_optional_param(request, "search")
            )
        except Exception:
            logger.exception("Error in RFID logs API")
            return _error("Internal server error", 500)

        return JSONResponse({"logs": [scan_event_to_json(log) for log in logs]})

    async def get_presence(self, request: Request) -> Response:
        """List the students currently inside and currently out."""
        try:
            event_filter = build_roster_filter(request, self.config.log_limit)
        except InvalidQueryError as e:
            return _error(str(e), 400)

        try:
            snapshot = await self.scan_log_reader.presence(event_filter)
        except Exception:
            logger.exception("Error in presence API")
            return _error("Internal server error", 500)

        return JSONResponse(presence_snapshot_to_json(snapshot))

    async def get_filter_options(self, request: Request) -> Response:
        """List the buildings and rooms seen in recent logs, for the log filters.

        ``building`` narrows the rooms to one building; ``all`` means every building.
        """
        try:
            event_filter = build_roster_filter(request, self.config.log_limit)
        except InvalidQueryError as e:
            return _error(str(e), 400)

        try:
            options = await self.scan_log_reader.filter_options(
                event_filter, building=_optional_param(request, "building")
            )
        except Exception:
            logger.exception("Error in filter options API")
            return _error("Internal server error", 500)

        return JSONResponse(filter_options_to_json(options))

    async def list_notifications(self, request: Request) -> Response:
        """List a student's notifications."""
        user_id = _optional_param(request, "userId")
        if user_id is None:
            return _error("userId is required", 400)

        try:
            notifications = await self.notification_repository.list_student_notifications(user_id)
        except Exception:
            logger.exception("Error in notifications API")
            return _error("Internal server error", 500)

        return JSONResponse({"notifications": [notification_to_json(n) for n in notifications]})

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def create_app(
    scan_processor: ScanProcessor,
    scan_log_reader: ScanLogReader,
    notification_repository: NotificationRepository,
    config: AppConfig,
) -> Starlette:
    """Create the Starlette application with rate limiting."""
    api = DormPresenceApi(scan_processor, scan_log_reader, notification_repository, config)
    return Starlette(
        routes=api.routes(),
        middleware=[
            Middleware(RateLimitMiddleware, requests_per_minute=config.rate_limit_per_minute)
        ],
    )
