"""Free/busy computation over the seller's upcoming days (seven by default).

The same ``(events, now)`` always yields the same report. Minutes are counted
from local midnight. Events whose times cannot be parsed are logged and left
out of the report.

An all-day entry blocks its whole day, even when the rest of the day is empty.
Whether all-day entries should instead be ignored for slot purposes is still
pending product clarification; keep the blocking behaviour until then.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from ..domain import BusyInterval, CalendarEvent, DayAvailability, DayStatus, FreeSlot

WINDOW_DAYS = 7
BUSINESS_START = 8 * 60
BUSINESS_END = 18 * 60
MIN_SLOT_MINUTES = 30
SLOT_GRANULARITY = 30
DEFAULT_EVENT_MINUTES = 60
MINUTES_PER_DAY = 24 * 60

logger = logging.getLogger(__name__)


def _is_date_only(value: str) -> bool:
    return "T" not in value and " " not in value.strip()


def _parse_timestamp(value: str, zone: Optional[tzinfo]) -> datetime:
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if zone is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(zone)
    return parsed


def _event_date(event: CalendarEvent, zone: Optional[tzinfo]) -> date:
    if event.is_all_day:
        return date.fromisoformat(event.start.strip()[:10])
    return _parse_timestamp(event.start, zone).date()


def _minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def bucket_events(
    events: Iterable[CalendarEvent],
    now: datetime,
    days: int = WINDOW_DAYS,
) -> List[List[CalendarEvent]]:
    """Group events into one bucket per day of the window, day 0 being ``now``'s date."""

    zone = now.tzinfo
    anchor = now.date()
    buckets: List[List[CalendarEvent]] = [[] for _ in range(days)]
    for event in events:
        try:
            event_date = _event_date(event, zone)
            if not event.is_all_day:
                busy_interval(event, zone)
        except ValueError as exc:
            logger.warning("Skipping calendar event %s with unreadable times: %s", event.id, exc)
            continue
        offset = (event_date - anchor).days
        if 0 <= offset < days:
            buckets[offset].append(event)
    return buckets


def busy_interval(event: CalendarEvent, zone: Optional[tzinfo] = None) -> BusyInterval:
    start = _parse_timestamp(event.start, zone)
    start_minute = _minute_of_day(start)

    if not event.end or _is_date_only(event.end):
        return BusyInterval(start_minute, start_minute + DEFAULT_EVENT_MINUTES)

    end = _parse_timestamp(event.end, zone)
    if end.date() > start.date():
        end_minute = MINUTES_PER_DAY
    else:
        end_minute = _minute_of_day(end)
    return BusyInterval(start_minute, max(start_minute, end_minute))


def scan_start(day: int, now: datetime) -> int:
    if day != 0:
        return BUSINESS_START
    rounded = -(-_minute_of_day(now) // SLOT_GRANULARITY) * SLOT_GRANULARITY
    return max(BUSINESS_START, rounded)


def _clip(start: int, end: int) -> tuple[int, int]:
    return max(start, BUSINESS_START), min(end, BUSINESS_END)


def day_free_slots(
    day: int,
    events: Sequence[CalendarEvent],
    start_minute: int,
    zone: Optional[tzinfo] = None,
) -> List[FreeSlot]:
    if any(event.is_all_day for event in events):
        return []

    intervals = sorted(
        (busy_interval(event, zone) for event in events),
        key=lambda interval: (interval.start_minute, interval.end_minute),
    )

    slots: List[FreeSlot] = []
    pointer = start_minute
    for interval in intervals:
        if interval.start_minute - pointer >= MIN_SLOT_MINUTES:
            slot_start, slot_end = _clip(pointer, interval.start_minute)
            if slot_end - slot_start >= MIN_SLOT_MINUTES:
                slots.append(FreeSlot(day, slot_start, slot_end))
        # Never regress: overlapping and nested intervals are absorbed here.
        pointer = max(pointer, interval.end_minute)

    if BUSINESS_END - pointer >= MIN_SLOT_MINUTES:
        slots.append(FreeSlot(day, pointer, BUSINESS_END))
    return slots


def compute_free_slots(
    events: Iterable[CalendarEvent],
    now: datetime,
    days: int = WINDOW_DAYS,
) -> List[List[FreeSlot]]:
    """Return the free slots of each day in the window (index 0 is today)."""

    buckets = bucket_events(events, now, days)
    return [
        day_free_slots(day, day_events, scan_start(day, now), now.tzinfo)
        for day, day_events in enumerate(buckets)
    ]


def _day_status(day_events: Sequence[CalendarEvent], slots: Sequence[FreeSlot]) -> DayStatus:
    if any(event.is_all_day for event in day_events):
        return DayStatus.BLOCKED_ALL_DAY
    if not day_events:
        return DayStatus.FREE_ALL_DAY if slots else DayStatus.CLOSED
    return DayStatus.AVAILABLE if slots else DayStatus.FULLY_BOOKED


def build_availability_report(
    events: Iterable[CalendarEvent],
    now: datetime,
    days: int = WINDOW_DAYS,
) -> List[DayAvailability]:
    buckets = bucket_events(events, now, days)
    in_window = [event for day_events in buckets for event in day_events]
    free_slots = compute_free_slots(in_window, now, days)

    anchor = now.date()
    return [
        DayAvailability(
            day=day,
            date=anchor + timedelta(days=day),
            status=_day_status(buckets[day], slots),
            slots=tuple(slot.label() for slot in slots),
        )
        for day, slots in enumerate(free_slots)
    ]


_STATUS_TEXT: Dict[DayStatus, str] = {
    DayStatus.FREE_ALL_DAY: "free all day",
    DayStatus.FULLY_BOOKED: "fully booked",
    DayStatus.BLOCKED_ALL_DAY: "blocked by an all-day event",
    DayStatus.CLOSED: "no time left",
}


def render_availability(report: Sequence[DayAvailability]) -> str:
    lines: List[str] = []
    for entry in report:
        label = entry.date.strftime("%a %Y-%m-%d")
        if entry.day == 0:
            label += " (today)"
        if entry.status is DayStatus.AVAILABLE:
            detail = ", ".join(entry.slots)
        elif entry.status is DayStatus.FREE_ALL_DAY and entry.day == 0 and entry.slots:
            detail = f"free from {entry.slots[0].split('-')[0]}"
        else:
            detail = _STATUS_TEXT[entry.status]
        lines.append(f"- {label}: {detail}")
    return "\n".join(lines)
