"""
Digest and home-dashboard aggregation.

Everything ranked or scored here was computed by the backend; this module
only fetches, filters and merges it into display panels.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Generic, TypeVar

from core.backend_client import BackendClient, BackendError
from core.calendar_grid import effective_bounds, event_sort_key, local_midnight
from core.config import (
    EMAIL_WIDGET_LIMIT,
    EMAIL_WINDOWS,
    EVENT_LOOKBACK_DAYS,
    RECENT_EMAIL_LIMIT,
    TIMELINE_ACTIONS_LIMIT,
    TOP_ACTIONS_LIMIT,
)
from models.digest import DigestRecord, DigestTopAction, Email, TodayDigest
from models.events import CalendarEvent
from services.calendar import EventFilters, list_events

logger = logging.getLogger(__name__)

T = TypeVar("T")

TREND_LABELS = {
    "improving": "Improving",
    "steady": "Steady",
    "slipping": "Slipping",
}


@dataclass
class Panel(Generic[T]):
    """One dashboard panel: its data, or the error that replaced it."""

    data: T
    error: str | None = None


@dataclass
class HomeOverview:
    digest: Panel[TodayDigest]
    top_actions: list[DigestTopAction]
    timeline_actions: list[DigestTopAction]
    emails: Panel[list[Email]]
    label_options: list[str]
    today_events: Panel[list[CalendarEvent]]
    filters: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# BACKEND CALLS
# =============================================================================


async def fetch_today_digest(backend: BackendClient) -> TodayDigest:
    payload = await backend.get("/api/digest/today", default_error="Failed to load digest overview")
    return TodayDigest.model_validate(payload)


async def fetch_digest_history(backend: BackendClient, limit: int = 7) -> list[DigestRecord]:
    payload = await backend.get(
        "/api/digests",
        params={"limit": limit},
        default_error="Failed to load digest history",
    )
    return [DigestRecord.model_validate(row) for row in payload.get("digests") or []]


async def fetch_recent_emails(backend: BackendClient, per_page: int = RECENT_EMAIL_LIMIT) -> list[Email]:
    payload = await backend.get(
        "/api/emails",
        params={"page": 1, "perPage": per_page},
        default_error="Failed to fetch emails",
    )
    return [Email.model_validate(row) for row in payload.get("items") or []]


async def fetch_today_events(backend: BackendClient, tz: tzinfo, now: datetime | None = None) -> list[CalendarEvent]:
    """
    Events touching today, in display order.

    The backend filters on start only, so the fetch opens EVENT_LOOKBACK_DAYS
    early and events that ended before today are dropped here.
    """
    now = now or datetime.now(tz)
    start = local_midnight(now, tz)
    end = local_midnight(start.date() + timedelta(days=1), tz)
    filters = EventFilters(
        assigned="all",
        range_start=start - timedelta(days=EVENT_LOOKBACK_DAYS),
        range_end=end,
    )
    events, _ = await list_events(backend, filters)
    today = []
    for event in events:
        bounds = effective_bounds(event, tz)
        if bounds and bounds[1] >= start and bounds[0] < end:
            today.append(event)
    return sorted(today, key=lambda e: event_sort_key(e, tz))


# =============================================================================
# DISPLAY FILTERS
# =============================================================================


def filter_emails(
    emails: list[Email],
    window: str,
    label: str = "all",
    now: datetime | None = None,
    limit: int = EMAIL_WIDGET_LIMIT,
) -> list[Email]:
    """
    Apply the email widget's label and time-window dropdowns.

    Emails with no parseable received time are dropped whenever a window
    applies; unknown windows behave like "all".
    """
    now = now or datetime.now(timezone.utc)
    hours = EMAIL_WINDOWS.get(window)
    cutoff = now - timedelta(hours=hours) if hours is not None else None

    result = []
    for email in emails:
        if label != "all" and email.category != label:
            continue
        if cutoff is not None:
            received = email.received_at
            if received is None:
                continue
            if received.tzinfo is None:
                received = received.replace(tzinfo=timezone.utc)
            if received < cutoff:
                continue
        result.append(email)
    return result[:limit]


def email_label_options(emails: list[Email]) -> list[str]:
    return sorted({email.category for email in emails if email.category})


def timeline_actions(actions: list[DigestTopAction]) -> list[DigestTopAction]:
    return [a for a in actions if a.entity_type == "timeline"][:TIMELINE_ACTIONS_LIMIT]


def format_trend(trend: str | None) -> str:
    if not trend:
        return "—"
    return TREND_LABELS.get(trend, trend)


# =============================================================================
# HOME OVERVIEW
# =============================================================================


def _error_message(result: BaseException, fallback: str) -> str:
    if isinstance(result, BackendError):
        return result.message
    logger.exception("Unexpected failure loading home panel", exc_info=result)
    return fallback


async def build_home_overview(
    backend: BackendClient,
    tz: tzinfo,
    window: str = "24h",
    label: str = "all",
    now: datetime | None = None,
) -> HomeOverview:
    """
    Load every home panel concurrently.

    Each panel fails on its own: a failed fetch leaves that panel empty
    with an error message while the others still render.
    """
    now = now or datetime.now(tz)
    digest_result, emails_result, events_result = await asyncio.gather(
        fetch_today_digest(backend),
        fetch_recent_emails(backend),
        fetch_today_events(backend, tz, now),
        return_exceptions=True,
    )

    if isinstance(digest_result, BaseException):
        digest_panel = Panel(TodayDigest(), _error_message(digest_result, "Failed to load digest overview"))
    else:
        digest_panel = Panel(digest_result)

    if isinstance(emails_result, BaseException):
        all_emails = []
        email_panel = Panel([], _error_message(emails_result, "Failed to load emails"))
    else:
        all_emails = emails_result
        email_panel = Panel(filter_emails(all_emails, window, label, now))

    if isinstance(events_result, BaseException):
        events_panel = Panel([], _error_message(events_result, "Failed to load calendar events"))
    else:
        events_panel = Panel(events_result)

    actions = digest_panel.data.digest.top_actions if digest_panel.data.digest else []

    return HomeOverview(
        digest=digest_panel,
        top_actions=actions[:TOP_ACTIONS_LIMIT],
        timeline_actions=timeline_actions(actions),
        emails=email_panel,
        label_options=email_label_options(all_emails),
        today_events=events_panel,
        filters={"window": window, "label": label},
    )
