"""Presence reconciliation over the RFID scan log."""

import bisect
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo

from dorm_presence.application.services.duration_formatter import NO_DURATION, format_duration
from dorm_presence.application.services.timestamp_parser import parse_timestamp
from dorm_presence.domain.contracts.clock import Clock
from dorm_presence.domain.models.presence import PresenceRecord, PresenceSnapshot
from dorm_presence.domain.models.scan_action import ScanAction, SessionStatus
from dorm_presence.domain.models.scan_event import AnnotatedScanEvent, ScanEvent

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_FALLBACK = timedelta(hours=1)


@dataclass(frozen=True)
class _ResolvedEvent:
    """A scan event with its position in the input and its effective instant."""

    index: int
    event: ScanEvent
    instant: datetime
    was_invalid: bool


class PresenceReconciler:
    """Derives stay durations and current presence from scan events.

    Both operations are pure functions of the event list and the clock: no
    state is kept between calls and malformed events never raise. An event
    whose timestamp cannot be parsed gets a fallback instant (the current
    time for exits, one hour earlier for entries) and is flagged on the
    annotated output.
    """

    def __init__(
        self,
        clock: Clock,
        tz: tzinfo | None = None,
        entry_fallback: timedelta = DEFAULT_ENTRY_FALLBACK,
    ) -> None:
        """Initialize the reconciler.

        Args:
            clock: Source of the current time, used for fallback instants.
            tz: Timezone of naive timestamps. Defaults to the clock's timezone.
            entry_fallback: How far before now an unparseable entry is placed.
        """
        self._clock = clock
        self._tz = tz
        self._entry_fallback = entry_fallback

    def annotate(self, events: Sequence[ScanEvent]) -> list[AnnotatedScanEvent]:
        """Annotate each event with the duration of the stay it ends.

        An exit is matched with the same student's latest entry strictly
        before it. Entries, denied scans and unmatched exits get ``"-"``.
        The output has the same length and order as the input.
        """
        return self._annotate_resolved(self._resolve_all(events))

    def classify_presence(self, events: Sequence[ScanEvent]) -> list[PresenceRecord]:
        """Reduce the events to one presence record per student.

        The record's last event is the student's event with the latest
        instant; on equal instants the one later in the input wins. A student
        is present when that event is an entry. Records are ordered by each
        student's first appearance in the input.
        """
        resolved = self._resolve_all(events)
        annotated = self._annotate_resolved(resolved)

        latest: dict[str, _ResolvedEvent] = {}
        for item in resolved:
            student_id = item.event.student_id
            if not item.event.has_student_id or student_id is None:
                continue
            current = latest.get(student_id)
            if current is None or item.instant >= current.instant:
                latest[student_id] = item

        return [
            PresenceRecord(
                student_id=student_id,
                last_event=annotated[item.index],
                currently_present=item.event.action == ScanAction.ENTRY,
            )
            for student_id, item in latest.items()
        ]

    def snapshot(self, events: Sequence[ScanEvent]) -> PresenceSnapshot:
        """Split the presence records into students inside and students out."""
        records = self.classify_presence(events)
        return PresenceSnapshot(
            present=[record for record in records if record.currently_present],
            out=[record for record in records if not record.currently_present],
        )

    def _now(self) -> datetime:
        now = self._clock.now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=self._tz or UTC)
        return now

    def _resolve_all(self, events: Sequence[ScanEvent]) -> list[_ResolvedEvent]:
        now = self._now()
        tz = self._tz or now.tzinfo or UTC
        return [self._resolve(index, event, tz, now) for index, event in enumerate(events)]

    def _resolve(self, index: int, event: ScanEvent, tz: tzinfo, now: datetime) -> _ResolvedEvent:
        parsed = parse_timestamp(event.timestamp, tz, now)
        if parsed.is_valid and parsed.instant is not None:
            return _ResolvedEvent(index, event, parsed.instant, was_invalid=False)

        fallback = now - self._entry_fallback if event.action == ScanAction.ENTRY else now
        logger.warning(
            f"Invalid timestamp {event.timestamp!r} on {event.action!r} event "
            f"for student {event.student_id!r}, using {fallback.isoformat()} instead"
        )
        return _ResolvedEvent(index, event, fallback, was_invalid=True)

    def _annotate_resolved(self, resolved: list[_ResolvedEvent]) -> list[AnnotatedScanEvent]:
        entries_by_student = self._entries_by_student(resolved)

        annotated: list[AnnotatedScanEvent] = []
        for item in resolved:
            event = item.event
            if event.action != ScanAction.EXIT or not event.has_student_id:
                annotated.append(
                    AnnotatedScanEvent.from_event(event, timestamp_was_invalid=item.was_invalid)
                )
                continue

            match = self._closest_entry_before(item, entries_by_student.get(event.student_id, []))
            if match is None:
                annotated.append(
                    AnnotatedScanEvent.from_event(event, timestamp_was_invalid=item.was_invalid)
                )
                continue

            duration = format_duration(item.instant - match.instant)
            annotated.append(
                AnnotatedScanEvent.from_event(
                    event,
                    duration=duration,
                    session_status=SessionStatus.COMPLETED,
                    timestamp_was_invalid=item.was_invalid,
                    duration_was_estimated=duration != NO_DURATION
                    and (item.was_invalid or match.was_invalid),
                )
            )
        return annotated

    @staticmethod
    def _entries_by_student(resolved: list[_ResolvedEvent]) -> dict[str, list[_ResolvedEvent]]:
        """Group entry events by student, sorted by instant then input position."""
        groups: dict[str, list[_ResolvedEvent]] = {}
        for item in resolved:
            event = item.event
            if not event.has_student_id or event.student_id is None:
                logger.debug(f"Skipping {event.action!r} event without a student id: {event.id}")
                continue
            if event.action == ScanAction.ENTRY:
                groups.setdefault(event.student_id, []).append(item)

        for entries in groups.values():
            entries.sort(key=lambda entry: (entry.instant, entry.index))
        return groups

    @staticmethod
    def _closest_entry_before(
        exit_event: _ResolvedEvent, entries: list[_ResolvedEvent]
    ) -> _ResolvedEvent | None:
        """Find the latest entry strictly before the exit, or None."""
        instants = [entry.instant for entry in entries]
        position = bisect.bisect_left(instants, exit_event.instant)
        if position == 0:
            return None
        return entries[position - 1]
