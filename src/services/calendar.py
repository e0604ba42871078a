"""
Calendar event fetching, mutations, and grid assembly.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from core.backend_client import BackendClient, BackendError
from core.calendar_grid import (
    DateRange,
    DayPosition,
    bucket_events,
    build_range,
    day_key,
    day_position,
    format_range_label,
    local_midnight,
    shift_anchor,
)
from core.config import ASSIGNED_FILTERS, CALENDAR_EVENT_LIMIT, EVENT_LOOKBACK_DAYS
from core.validation import build_event_payload
from models.events import CalendarEvent, CalendarSourceSummary
from models.forms import CalendarEventForm

logger = logging.getLogger(__name__)


@dataclass
class EventFilters:
    """Query filters for the backend's calendar event listing."""

    assigned: str = "all"
    source_id: str | None = None
    project_id: str | None = None
    include_ignored: bool = False
    range_start: datetime | None = None
    range_end: datetime | None = None
    query: str | None = None
    limit: int = CALENDAR_EVENT_LIMIT

    def to_params(self) -> dict:
        assigned = self.assigned if self.assigned in ASSIGNED_FILTERS else "all"
        return {
            "assigned": assigned,
            "sourceId": self.source_id,
            "projectId": self.project_id,
            "includeIgnored": self.include_ignored,
            "rangeStart": self.range_start.isoformat() if self.range_start else None,
            "rangeEnd": self.range_end.isoformat() if self.range_end else None,
            "q": self.query,
            "limit": max(1, min(self.limit, CALENDAR_EVENT_LIMIT)),
        }


@dataclass
class PositionedEvent:
    event: CalendarEvent
    position: DayPosition


@dataclass
class CalendarDay:
    day: date
    is_today: bool
    in_focus: bool  # False for leading/trailing days of a month grid
    all_day: list[CalendarEvent] = field(default_factory=list)
    timed: list[PositionedEvent] = field(default_factory=list)

    @property
    def key(self) -> str:
        return day_key(self.day)


@dataclass
class CalendarView:
    view: str
    anchor: date
    label: str
    range: DateRange
    days: list[CalendarDay]
    previous_anchor: date
    next_anchor: date
    total_events: int

    @property
    def weeks(self) -> list[list[CalendarDay]]:
        return [self.days[i:i + 7] for i in range(0, len(self.days), 7)]


# =============================================================================
# BACKEND CALLS
# =============================================================================


async def list_events(backend: BackendClient, filters: EventFilters) -> tuple[list[CalendarEvent], int]:
    """Fetch calendar events; returns (events, total count)."""
    payload = await backend.get(
        "/api/calendar/events",
        params=filters.to_params(),
        default_error="Failed to load calendar events",
    )
    events = [CalendarEvent.model_validate(row) for row in payload.get("events") or []]
    count = payload.get("count")
    return events, count if isinstance(count, int) else len(events)


async def list_sources(backend: BackendClient) -> list[CalendarSourceSummary]:
    payload = await backend.get(
        "/api/calendar/sources",
        default_error="Failed to load calendar sources",
    )
    return [CalendarSourceSummary.model_validate(row) for row in payload.get("sources") or []]


async def create_event(backend: BackendClient, form: CalendarEventForm, tz: tzinfo) -> CalendarEvent:
    body = build_event_payload(form, tz)
    payload = await backend.post(
        "/api/calendar/events",
        json=body,
        default_error="Failed to create calendar event",
    )
    event = CalendarEvent.model_validate(payload.get("event") or {})
    logger.info("Created calendar event %s (%s)", event.id, event.title)
    return event


async def assign_event(backend: BackendClient, event_id: str, project_id: str | None) -> CalendarEvent:
    """Assign an event to a project, or clear the assignment with None."""
    payload = await backend.patch(
        f"/api/calendar/events/{event_id}",
        json={"assignedProjectId": project_id},
        default_error="Failed to update event",
    )
    return CalendarEvent.model_validate(payload.get("event") or {})


async def set_event_ignored(backend: BackendClient, event_id: str, ignore: bool) -> CalendarEvent:
    payload = await backend.patch(
        f"/api/calendar/events/{event_id}",
        json={"ignore": ignore},
        default_error="Failed to update event",
    )
    return CalendarEvent.model_validate(payload.get("event") or {})


async def pull_source(backend: BackendClient, project_id: str, source_id: str) -> dict:
    """Ask the backend to pull fresh events for one connected calendar."""
    return await backend.post(
        f"/api/projects/{project_id}/sources/calendar/{source_id}/pull",
        default_error="Failed to sync calendar",
    )


async def sync_all_sources(backend: BackendClient) -> int:
    """
    Pull every connected calendar that belongs to a project.

    Returns the number of sources pulled. Stops at the first failure.
    """
    sources = await list_sources(backend)
    if not sources:
        raise BackendError("No calendars are connected yet.", status_code=400)

    pulled = 0
    for entry in sources:
        project_id = entry.project_id
        if not project_id:
            logger.info("Skipping calendar %s with no project", entry.source.display_name)
            continue
        await pull_source(backend, project_id, entry.source.id)
        pulled += 1
    logger.info("Synced %d of %d calendar sources", pulled, len(sources))
    return pulled


# =============================================================================
# GRID ASSEMBLY
# =============================================================================


def assemble_view(
    events: list[CalendarEvent],
    view: str,
    anchor: date,
    tz: tzinfo,
    today: date | None = None,
) -> CalendarView:
    """Bucket and position events for one rendered calendar view."""
    today = today or datetime.now(tz).date()
    date_range = build_range(anchor, view, tz)
    buckets = bucket_events(events, date_range, tz)

    days = []
    for day in date_range.days():
        bucket = buckets[day_key(day)]
        midnight = local_midnight(day, tz)
        days.append(
            CalendarDay(
                day=day,
                is_today=day == today,
                in_focus=view != "month" or day.month == anchor.month,
                all_day=list(bucket.all_day),
                timed=[PositionedEvent(e, day_position(e, midnight, tz)) for e in bucket.timed],
            )
        )

    visible_ids = {e.id for day in days for e in day.all_day}
    visible_ids.update(p.event.id for day in days for p in day.timed)

    return CalendarView(
        view=view,
        anchor=anchor,
        label=format_range_label(view, anchor),
        range=date_range,
        days=days,
        previous_anchor=shift_anchor(anchor, view, -1),
        next_anchor=shift_anchor(anchor, view, 1),
        total_events=len(visible_ids),
    )


async def build_calendar_view(
    backend: BackendClient,
    view: str,
    anchor: date,
    tz: tzinfo,
    project_id: str | None = None,
    source_id: str | None = None,
    extra_events: list[CalendarEvent] | None = None,
) -> CalendarView:
    """
    Fetch the events visible in a view and lay them out.

    The backend filters on start time, so the fetch window opens a few days
    early to catch multi-day events that began before the visible range.
    """
    date_range = build_range(anchor, view, tz)
    filters = EventFilters(
        assigned="all",
        project_id=project_id,
        source_id=source_id,
        range_start=date_range.start - timedelta(days=EVENT_LOOKBACK_DAYS),
        range_end=date_range.end,
    )
    events, _ = await list_events(backend, filters)
    events.extend(extra_events or [])
    return assemble_view(events, view, anchor, tz)
