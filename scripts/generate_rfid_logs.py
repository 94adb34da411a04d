#!/usr/bin/env python3
"""Generate a sample RFID log export for testing.

Writes a JSON list of ``rfidLogs`` documents covering the past week. Each
student alternates between entry and exit, with the occasional repeated
action a flaky reader produces.
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

STUDENTS = [
    ("ST1001", "John Smith"),
    ("ST1002", "Maria Garcia"),
    ("ST1003", "David Lee"),
    ("ST1004", "Sarah Johnson"),
    ("ST1005", "Ahmed Hassan"),
    ("ST1006", "Emma Wilson"),
    ("ST1007", "Carlos Rodriguez"),
    ("ST1008", "Priya Patel"),
]

BUILDINGS = [("Building A", "dorm-building-a"), ("Building B", "dorm-building-b")]


def generate_logs(
    now: datetime, days: int = 7, scans_per_student: int = 20, repeat_rate: float = 0.05
) -> list[dict[str, Any]]:
    """Generate scan log documents for every sample student."""
    logs: list[dict[str, Any]] = []
    for index, (student_id, name) in enumerate(STUDENTS):
        building, dorm_id = BUILDINGS[index % len(BUILDINGS)]
        room = f"Room {random.randint(1, 20)}"
        offsets = sorted(random.sample(range(days * 24 * 60), scans_per_student), reverse=True)
        action = "entry"
        for minutes_ago in offsets:
            scanned_at = now - timedelta(minutes=minutes_ago, seconds=random.randint(0, 59))
            logs.append(
                {
                    "studentId": student_id,
                    "studentName": name,
                    "action": action,
                    "timestamp": scanned_at.strftime("%Y-%m-%d %H:%M:%S"),
                    "room": room,
                    "building": building,
                    "dormId": dorm_id,
                    "dormName": building,
                }
            )
            if random.random() >= repeat_rate:
                action = "exit" if action == "entry" else "entry"
    logs.sort(key=lambda log: log["timestamp"], reverse=True)
    return logs


def main() -> None:
    """Write the generated logs to a file or stdout."""
    parser = argparse.ArgumentParser(description="Generate a sample RFID log export")
    parser.add_argument("output", nargs="?", type=Path, help="Output file (default: stdout)")
    parser.add_argument("--days", type=int, default=7, help="How many days back to cover")
    parser.add_argument("--scans", type=int, default=20, help="Scans per student")
    parser.add_argument("--timezone", default="Asia/Manila", help="Wall-clock timezone")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    logs = generate_logs(datetime.now(ZoneInfo(args.timezone)), args.days, args.scans)
    text = json.dumps(logs, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(logs)} RFID logs to {args.output}", file=sys.stderr)
    else:
        print(text)


if __name__ == "__main__":
    main()
