"""Calendar endpoints: grid views, event listing, creation and sync."""

from datetime import datetime, tzinfo

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies import get_backend, get_display_timezone
from api.models.responses import (
    CalendarEventResponse,
    CalendarSourceResponse,
    CalendarViewResponse,
    EventListResponse,
    SyncResponse,
)
from core.backend_client import BackendClient
from core.calendar_grid import build_range
from core.query_state import parse_view_state, to_query_params
from models.forms import CalendarEventForm, EventAssignmentForm, EventIgnoreForm
from services.calendar import (
    EventFilters,
    assign_event,
    build_calendar_view,
    create_event,
    list_events,
    list_sources,
    set_event_ignored,
    sync_all_sources,
)
from services.projects import explore_timeline, explorer_events

router = APIRouter(prefix="/v1/calendar", tags=["calendar"])


@router.get("", response_model=CalendarViewResponse)
async def calendar_view(
    request: Request,
    source_id: str | None = Query(None, alias="sourceId"),
    include_timeline: bool = Query(False, alias="includeTimeline"),
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    """
    Render the month, week or day grid around ?date= (default today).

    With ?projectId= and ?includeTimeline=true the project's timeline items
    and dated tasks are laid out alongside its calendar events.
    """
    today = datetime.now(tz).date()
    state = parse_view_state(request.query_params, today=today)

    extra_events = []
    if include_timeline and state.project_id:
        date_range = build_range(state.anchor, state.view, tz)
        explorer = await explore_timeline(backend, state.project_id, state.lane, date_range)
        extra_events = explorer_events(explorer)

    view = await build_calendar_view(
        backend,
        state.view,
        state.anchor,
        tz,
        project_id=state.project_id,
        source_id=source_id,
        extra_events=extra_events,
    )
    return CalendarViewResponse.from_view(view, tz, to_query_params(state, today=today))


@router.get("/events", response_model=EventListResponse)
async def get_events(
    assigned: str = "all",
    source_id: str | None = Query(None, alias="sourceId"),
    project_id: str | None = Query(None, alias="projectId"),
    include_ignored: bool = Query(False, alias="includeIgnored"),
    range_start: datetime | None = Query(None, alias="rangeStart"),
    range_end: datetime | None = Query(None, alias="rangeEnd"),
    q: str | None = None,
    limit: int = Query(200, ge=1, le=500),
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    """List raw events with the backend's filters."""
    filters = EventFilters(
        assigned=assigned,
        source_id=source_id,
        project_id=project_id,
        include_ignored=include_ignored,
        range_start=range_start,
        range_end=range_end,
        query=q,
        limit=limit,
    )
    events, count = await list_events(backend, filters)
    return EventListResponse(
        events=[CalendarEventResponse.from_event(e, tz) for e in events],
        count=count,
    )


@router.post("/events", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
async def post_event(
    form: CalendarEventForm,
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    """Create a Kazador-origin event from the add-event form."""
    event = await create_event(backend, form, tz)
    return CalendarEventResponse.from_event(event, tz)


@router.get("/sources", response_model=list[CalendarSourceResponse])
async def get_sources(backend: BackendClient = Depends(get_backend)):
    sources = await list_sources(backend)
    return [CalendarSourceResponse.from_summary(entry) for entry in sources]


@router.patch("/events/{event_id}/assignment", response_model=CalendarEventResponse)
async def patch_assignment(
    event_id: str,
    form: EventAssignmentForm,
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    event = await assign_event(backend, event_id, form.project_id)
    return CalendarEventResponse.from_event(event, tz)


@router.patch("/events/{event_id}/ignore", response_model=CalendarEventResponse)
async def patch_ignore(
    event_id: str,
    form: EventIgnoreForm,
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    event = await set_event_ignored(backend, event_id, form.ignore)
    return CalendarEventResponse.from_event(event, tz)


@router.post("/sync", response_model=SyncResponse)
async def post_sync(backend: BackendClient = Depends(get_backend)):
    """Pull fresh events for every connected calendar."""
    pulled = await sync_all_sources(backend)
    noun = "calendar" if pulled == 1 else "calendars"
    return SyncResponse(pulled=pulled, message=f"Synced {pulled} {noun}")
