"""Timeline explorer endpoint."""

from datetime import datetime, tzinfo

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_backend, get_display_timezone
from api.models.responses import CalendarEventResponse, ErrorCodes, TimelineResponse
from core.backend_client import BackendClient
from core.calendar_grid import build_range
from core.query_state import parse_view_state, to_query_params
from services.projects import explore_timeline, explorer_events

router = APIRouter(prefix="/v1", tags=["timeline"])


@router.get("/timeline", response_model=TimelineResponse)
async def timeline(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    """
    One project's timeline for the visible range of ?view= around ?date=.

    Requires ?projectId=; ?lane= narrows to a single lane.
    """
    today = datetime.now(tz).date()
    state = parse_view_state(request.query_params, today=today)
    if not state.project_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "projectId is required",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [],
            },
        )

    date_range = build_range(state.anchor, state.view, tz)
    explorer = await explore_timeline(backend, state.project_id, state.lane, date_range)

    return TimelineResponse(
        project=explorer.project,
        range_start=date_range.start.isoformat(),
        range_end=date_range.end.isoformat(),
        items=explorer.items,
        tasks=explorer.tasks,
        dependencies=explorer.dependencies,
        events=[CalendarEventResponse.from_event(e, tz) for e in explorer_events(explorer)],
        query=to_query_params(state, today=today),
    )
