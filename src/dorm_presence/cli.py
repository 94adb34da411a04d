"""Command-line client for the dormitory presence server."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import aiohttp

from dorm_presence.adapters.config import AppConfig
from dorm_presence.adapters.storage.document_repositories import scan_event_from_document
from dorm_presence.adapters.system_clock import SystemClock
from dorm_presence.adapters.serializers import (
    presence_snapshot_to_json,
    scan_event_to_json,
)
from dorm_presence.application.services import PresenceReconciler


class ApiError(Exception):
    """The server answered with an error."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status


async def _request(
    method: str,
    url: str,
    timeout: int,
    params: dict[str, Any] | None = None,
    payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Send a request and return the decoded JSON body."""
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.request(method, url, params=params, json=payload) as response:
            data = await response.json(content_type=None)
            if response.status != 200:
                message = data.get("error", "") if isinstance(data, dict) else str(data)
                raise ApiError(response.status, message or response.reason or "")
            if not isinstance(data, dict):
                raise ApiError(response.status, "unexpected response body")
            return data


async def send_scan(
    config: AppConfig, rfid_value: str, room_id: str | None = None, user_id: str | None = None
) -> dict[str, Any]:
    """Submit a card scan, as a reader would."""
    payload: dict[str, Any] = {"rfidValue": rfid_value}
    if room_id:
        payload["roomId"] = room_id
    if user_id:
        payload["userId"] = user_id
    return await _request(
        "POST", f"{config.api_url.rstrip('/')}/api/rfid", config.api_timeout, payload=payload
    )


async def fetch_logs(config: AppConfig, params: dict[str, Any]) -> list[dict[str, Any]]:
    """Fetch annotated scan logs."""
    data = await _request(
        "GET",
        f"{config.api_url.rstrip('/')}/api/rfid-logs",
        config.api_timeout,
        params={k: v for k, v in params.items() if v is not None},
    )
    logs = data.get("logs", [])
    return logs if isinstance(logs, list) else []


async def fetch_presence(config: AppConfig, params: dict[str, Any]) -> dict[str, Any]:
    """Fetch the presence rosters."""
    return await _request(
        "GET",
        f"{config.api_url.rstrip('/')}/api/presence",
        config.api_timeout,
        params={k: v for k, v in params.items() if v is not None},
    )


async def fetch_filter_options(config: AppConfig, params: dict[str, Any]) -> dict[str, Any]:
    """Fetch the buildings and rooms offered as log filters."""
    return await _request(
        "GET",
        f"{config.api_url.rstrip('/')}/api/rfid-logs/options",
        config.api_timeout,
        params={k: v for k, v in params.items() if v is not None},
    )


def load_log_export(path: Path) -> list[dict[str, Any]]:
    """Read scan log documents from a JSON export.

    Accepts either a list of log documents or the ``{"logs": [...]}`` body
    returned by the logs endpoint.

    Raises:
        ValueError: If the file holds neither.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("logs")
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of logs or an object with 'logs'")
    return [d for d in data if isinstance(d, dict)]


def reconcile_export(path: Path, config: AppConfig) -> dict[str, Any]:
    """Annotate an exported scan log and derive presence, without a server."""
    events = [scan_event_from_document(d) for d in load_log_export(path)]
    reconciler = PresenceReconciler(SystemClock(config.tzinfo), config.tzinfo)
    return {
        "logs": [scan_event_to_json(e) for e in reconciler.annotate(events)],
        **presence_snapshot_to_json(reconciler.snapshot(events)),
    }


def format_log_table(logs: list[dict[str, Any]]) -> str:
    """Render annotated logs as a fixed-width table."""
    lines = [
        f"{'Time':<20} {'Action':<7} {'Student':<12} {'Name':<24} {'Room':<10} Duration",
        "=" * 85,
    ]
    for log in logs:
        flag = " *" if log.get("durationWasEstimated") else ""
        lines.append(
            f"{str(log.get('timestamp') or '-'):<20} {str(log.get('action') or ''):<7} "
            f"{str(log.get('studentId') or ''):<12} {str(log.get('studentName') or ''):<24} "
            f"{str(log.get('room') or ''):<10} {log.get('duration', '-')}{flag}"
        )
    if any(log.get("durationWasEstimated") for log in logs):
        lines.append("\n* duration estimated from an invalid timestamp")
    return "\n".join(lines)


def format_presence(presence: dict[str, Any]) -> str:
    """Render the "currently in" and "currently out" rosters."""
    lines = [f"\nCurrently in ({presence.get('presentCount', 0)}):"]
    for record in presence.get("present", []):
        event = record.get("lastEvent", {})
        lines.append(
            f"  {record.get('studentId')}  {record.get('studentName')}  "
            f"since {event.get('timestamp')}  ({event.get('room') or 'Unknown'})"
        )
    lines.append(f"\nCurrently out ({presence.get('outCount', 0)}):")
    for record in presence.get("out", []):
        event = record.get("lastEvent", {})
        lines.append(
            f"  {record.get('studentId')}  {record.get('studentName')}  "
            f"since {event.get('timestamp')}"
        )
    return "\n".join(lines)


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Dormitory RFID presence client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Record a card scan at a room
  dorm-presence scan 0004512345 --room A-101

  # Show the latest exits of one student
  dorm-presence logs --student-id 2021-00123 --action exit

  # Show who is currently inside a dormitory
  dorm-presence presence --dorm-name "Acacia Hall"

  # Compute durations for an exported log file
  dorm-presence reconcile rfid-logs.json
        """,
    )
    parser.add_argument("--url", help="Server base URL (default: API_URL or http://127.0.0.1:8000)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    scan_parser = subparsers.add_parser("scan", help="Record an RFID card scan")
    scan_parser.add_argument("rfid_value", help="Value read from the card")
    scan_parser.add_argument("--room", help="Room the reader is installed in")
    scan_parser.add_argument("--user-id", help="Account submitting the scan")

    logs_parser = subparsers.add_parser("logs", help="List recent scan events with durations")
    logs_parser.add_argument("--limit", type=int, help="Number of events to fetch")
    logs_parser.add_argument("--action", choices=["entry", "exit", "denied"])
    logs_parser.add_argument("--student-id", help="Only this student's events")
    logs_parser.add_argument("--room", help="Only events at this room")
    logs_parser.add_argument("--dorm-name", help="Only events in this dormitory")
    logs_parser.add_argument("--search", help="Match student id, name or room")
    logs_parser.add_argument("--json", action="store_true", help="Output as JSON")

    presence_parser = subparsers.add_parser("presence", help="Show who is currently in or out")
    presence_parser.add_argument("--dorm-name", help="Only this dormitory")
    presence_parser.add_argument("--limit", type=int, help="Number of events to consider")
    presence_parser.add_argument("--json", action="store_true", help="Output as JSON")

    options_parser = subparsers.add_parser("options", help="List buildings and rooms to filter by")
    options_parser.add_argument("--dorm-name", help="Only this dormitory")
    options_parser.add_argument("--building", help="Only rooms of this building")

    reconcile_parser = subparsers.add_parser(
        "reconcile", help="Compute durations and presence for an exported log file"
    )
    reconcile_parser.add_argument("file", type=Path, help="JSON export of scan logs")
    reconcile_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = AppConfig(api_url=args.url) if args.url else AppConfig()

    try:
        if args.command == "scan":
            result = await send_scan(config, args.rfid_value, args.room, args.user_id)
            user = result.get("user", {})
            entry = result.get("logEntry", {})
            print(
                f"Access {entry.get('action')} for {user.get('firstName')} {user.get('lastName')} "
                f"at {entry.get('timestamp')} (room {entry.get('room')})"
            )

        elif args.command == "logs":
            logs = await fetch_logs(
                config,
                {
                    "limit": args.limit,
                    "action": args.action,
                    "studentId": args.student_id,
                    "room": args.room,
                    "dormName": args.dorm_name,
                    "search": args.search,
                },
            )
            if args.json:
                print(json.dumps(logs, indent=2, ensure_ascii=False))
            elif not logs:
                print("No scan events found.", file=sys.stderr)
            else:
                print(format_log_table(logs))

        elif args.command == "presence":
            presence = await fetch_presence(
                config, {"dormName": args.dorm_name, "limit": args.limit}
            )
            if args.json:
                print(json.dumps(presence, indent=2, ensure_ascii=False))
            else:
                print(format_presence(presence))

        elif args.command == "options":
            options = await fetch_filter_options(
                config, {"dormName": args.dorm_name, "building": args.building}
            )
            print("Buildings: " + (", ".join(options.get("buildings", [])) or "-"))
            print("Rooms: " + (", ".join(options.get("rooms", [])) or "-"))

        elif args.command == "reconcile":
            report = reconcile_export(args.file, config)
            if args.json:
                print(json.dumps(report, indent=2, ensure_ascii=False))
            else:
                print(format_log_table(report["logs"]))
                print(format_presence(report))

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
