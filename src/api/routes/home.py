"""Home dashboard and digest endpoints."""

from datetime import tzinfo

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_backend, get_display_timezone
from api.models.responses import (
    CalendarEventResponse,
    DigestHistoryResponse,
    EmailResponse,
    HomeResponse,
    Panel,
)
from core.backend_client import BackendClient
from core.config import DEFAULT_EMAIL_WINDOW
from models.digest import TodayDigest
from services.digest import build_home_overview, fetch_digest_history, fetch_today_digest, format_trend

router = APIRouter(prefix="/v1", tags=["home"])


@router.get("/home", response_model=HomeResponse)
async def home(
    window: str = DEFAULT_EMAIL_WINDOW,
    label: str = "all",
    backend: BackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_timezone),
):
    """
    Home overview: digest, top actions, recent emails and today's events.

    Panels load independently; a failed panel carries an error message and
    the rest of the page still renders.
    """
    overview = await build_home_overview(backend, tz, window=window, label=label)

    digest = overview.digest.data.digest
    trends = {}
    if digest:
        trends = {snap.project.id: format_trend(snap.metrics.trend) for snap in digest.projects}

    return HomeResponse(
        digest=Panel[TodayDigest](data=overview.digest.data, error=overview.digest.error),
        top_actions=overview.top_actions,
        timeline_actions=overview.timeline_actions,
        project_trends=trends,
        emails=Panel[list[EmailResponse]](
            data=[EmailResponse.from_email(e) for e in overview.emails.data],
            error=overview.emails.error,
        ),
        label_options=overview.label_options,
        today_events=Panel[list[CalendarEventResponse]](
            data=[CalendarEventResponse.from_event(e, tz) for e in overview.today_events.data],
            error=overview.today_events.error,
        ),
        filters=overview.filters,
    )


@router.get("/digest/today", response_model=TodayDigest)
async def digest_today(backend: BackendClient = Depends(get_backend)):
    return await fetch_today_digest(backend)


@router.get("/digest/history", response_model=DigestHistoryResponse)
async def digest_history(
    limit: int = Query(7, ge=1, le=30),
    backend: BackendClient = Depends(get_backend),
):
    return DigestHistoryResponse(digests=await fetch_digest_history(backend, limit))
