"""
Calendar grid computation: visible ranges, day buckets, and event positions.

All calculations happen in the display timezone. Naive timestamps are taken
to already be local to that zone.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from core.config import DEFAULT_EVENT_DURATION_MINUTES, MIN_EVENT_HEIGHT_PERCENT, VIEW_MODES
from models.events import CalendarEvent

DAY_MS = 24 * 60 * 60 * 1000
ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DateRange:
    """Half-open visible interval [start, end) at local midnights."""

    start: datetime
    end: datetime

    def days(self) -> list[date]:
        """Every calendar date in the range."""
        days = []
        cur = self.start.date()
        last = (self.end - ONE_DAY).date()
        while cur <= last:
            days.append(cur)
            cur += ONE_DAY
        return days


@dataclass(frozen=True)
class DayPosition:
    """Absolute placement of a timed event within a day column."""

    top_percent: float
    height_percent: float
    continues_before: bool
    continues_after: bool


@dataclass
class DayBucket:
    """Events touching one calendar day, split into all-day and timed."""

    all_day: list[CalendarEvent] = field(default_factory=list)
    timed: list[CalendarEvent] = field(default_factory=list)


def day_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def resolve_timezone(name: str | None) -> tzinfo:
    """ZoneInfo for name, falling back to UTC."""
    if not name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(name)
    except (ValueError, KeyError):
        return ZoneInfo("UTC")


def to_local(dt: datetime, tz: tzinfo) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def local_midnight(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        value = to_local(value, tz).date()
    return datetime.combine(value, time.min, tz)


def start_of_week(value: date) -> date:
    """Most recent Sunday on or before value."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


# =============================================================================
# RANGE CALCULATOR
# =============================================================================


def build_range(reference: date | datetime, view: str, tz: tzinfo) -> DateRange:
    """
    Compute the visible range for a view.

    day   -> [midnight, midnight + 1d)
    week  -> [Sunday on/before reference, + 7d)
    month -> full weeks: Sunday on/before the 1st through the Saturday
             ending the week of the last day of the month
    """
    if view not in VIEW_MODES:
        raise ValueError(f"Unknown calendar view '{view}'")

    if isinstance(reference, datetime):
        reference = to_local(reference, tz).date()

    if view == "day":
        start = reference
        end = reference + ONE_DAY
    elif view == "week":
        start = start_of_week(reference)
        end = start + timedelta(days=7)
    else:
        first = reference.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        last = next_month - ONE_DAY
        start = start_of_week(first)
        end = start_of_week(last) + timedelta(days=7)

    return DateRange(start=local_midnight(start, tz), end=local_midnight(end, tz))


def month_weeks(date_range: DateRange) -> list[list[date]]:
    """Split a month grid into rows of seven days."""
    days = date_range.days()
    return [days[i:i + 7] for i in range(0, len(days), 7)]


def shift_anchor(anchor: date, view: str, steps: int) -> date:
    """Move the anchor date by whole view units (previous/next buttons)."""
    if view == "day":
        return anchor + timedelta(days=steps)
    if view == "week":
        return anchor + timedelta(days=7 * steps)
    month_index = anchor.year * 12 + (anchor.month - 1) + steps
    year, month = divmod(month_index, 12)
    return date(year, month + 1, 1)


def iso_week_number(value: date) -> int:
    return value.isocalendar()[1]


def format_range_label(view: str, anchor: date) -> str:
    if view == "day":
        return f"{anchor:%A}, {anchor:%b} {anchor.day}, {anchor.year}"
    if view == "month":
        return f"{anchor:%B} {anchor.year}"
    start = start_of_week(anchor)
    end = start + timedelta(days=6)
    return f"{start:%b} {start.day} – {end:%b} {end.day}, {end.year}"


# =============================================================================
# EVENT BUCKETER
# =============================================================================


def effective_bounds(event: CalendarEvent, tz: tzinfo) -> tuple[datetime, datetime] | None:
    """Start/end with each substituting for the other; None if both missing."""
    start = event.start_at or event.end_at
    end = event.end_at or event.start_at
    if start is None or end is None:
        return None
    return to_local(start, tz), to_local(end, tz)


def is_all_day(event: CalendarEvent, tz: tzinfo) -> bool:
    if event.is_all_day:
        return True
    bounds = effective_bounds(event, tz)
    if bounds is None:
        return False
    start, end = bounds
    return end - start >= ONE_DAY and start.hour == 0 and end.hour == 0


def event_sort_key(event: CalendarEvent, tz: tzinfo) -> tuple:
    """
    Chronological display order.

    Undated events sort after every dated one; ties break by end, summary
    then id so repeated renders are stable.
    """
    bounds = effective_bounds(event, tz)
    if bounds is None:
        return (1, 0.0, 0.0, event.summary or "", event.id)
    start, end = bounds
    return (0, start.timestamp(), end.timestamp(), event.summary or "", event.id)


def bucket_events(
    events: list[CalendarEvent], date_range: DateRange, tz: tzinfo
) -> dict[str, DayBucket]:
    """
    Assign events to every visible day they touch.

    Returns a bucket for each day key in the range, empty or not.
    """
    buckets = {day_key(day): DayBucket() for day in date_range.days()}
    last_visible = date_range.end - ONE_DAY

    for event in events:
        bounds = effective_bounds(event, tz)
        if bounds is None:
            continue
        start, end = bounds

        if not (end >= date_range.start and start < date_range.end):
            continue

        first_day = max(start, date_range.start).date()
        last_day = min(end, last_visible).date()
        all_day = is_all_day(event, tz)

        cur = first_day
        while cur <= last_day:
            bucket = buckets.get(day_key(cur))
            if bucket is not None:
                (bucket.all_day if all_day else bucket.timed).append(event)
            cur += ONE_DAY

    for bucket in buckets.values():
        bucket.all_day.sort(key=lambda e: event_sort_key(e, tz))
        bucket.timed.sort(key=lambda e: event_sort_key(e, tz))

    return buckets


# =============================================================================
# DAY-POSITION CALCULATOR
# =============================================================================


def day_position(event: CalendarEvent, day_start: datetime, tz: tzinfo) -> DayPosition:
    """
    Place a timed event inside the [00:00, 24:00) window of one day.

    Short events get a minimum height so they stay visible; the block is
    nudged up when that minimum would push it past the bottom of the day.
    """
    day_start = to_local(day_start, tz)
    day_end = day_start + ONE_DAY

    raw_start = event.start_at or event.end_at
    if raw_start is None:
        raise ValueError(f"Event {event.id} has no start or end timestamp")
    start = to_local(raw_start, tz)
    if event.end_at is not None and event.start_at is not None:
        end = to_local(event.end_at, tz)
    else:
        end = start + timedelta(minutes=DEFAULT_EVENT_DURATION_MINUTES)

    clamped_start = min(max(start, day_start), day_end)
    clamped_end = min(max(end, clamped_start), day_end)

    offset_start = (clamped_start - day_start).total_seconds() * 1000
    offset_end = (clamped_end - day_start).total_seconds() * 1000

    top = offset_start / DAY_MS * 100
    height = max(MIN_EVENT_HEIGHT_PERCENT, (offset_end - offset_start) / DAY_MS * 100)
    if top + height > 100:
        top = max(0.0, 100 - height)

    return DayPosition(
        top_percent=top,
        height_percent=height,
        continues_before=start < day_start,
        continues_after=end > day_end,
    )
