"""
Calendar records: events and the calendar sources they come from.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from core.config import SYNC_STATUSES
from models.base import Record, parse_timestamp
from models.projects import Project

MEETING_URL_PATTERNS = [
    re.compile(r"(https?://[a-zA-Z0-9.-]+\.zoom\.us/[a-zA-Z0-9/?=&_%-]+)", re.IGNORECASE),
    re.compile(r"(https?://meet\.google\.com/[a-z0-9-]+)", re.IGNORECASE),
    re.compile(r"(https?://teams\.microsoft\.com/[a-zA-Z0-9/?=&_%-]+)", re.IGNORECASE),
]


class CalendarSource(Record):
    """A connected calendar (project source of kind 'calendar')."""

    id: str
    project_id: str | None = None
    kind: str | None = None
    external_id: str | None = None
    title: str | None = None
    metadata: dict[str, Any] | None = None

    @property
    def display_name(self) -> str:
        metadata = self.metadata or {}
        summary = metadata.get("calendarSummary")
        if isinstance(summary, str) and summary:
            return summary
        return self.title or self.external_id or "Calendar"


class CalendarSourceSummary(Record):
    """Source entry as listed by the backend, paired with its project."""

    source: CalendarSource
    project: Project | None = None

    @property
    def project_id(self) -> str | None:
        if self.project:
            return self.project.id
        return self.source.project_id


class CalendarEvent(Record):
    """Calendar event as stored by the backend."""

    id: str
    summary: str | None = None
    description: str | None = None
    location: str | None = None
    status: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    is_all_day: bool = False
    timezone: str | None = None
    origin: str = "google"
    source_id: str | None = None
    user_source_id: str | None = None
    calendar_id: str | None = None
    assigned_project_id: str | None = None
    ignore: bool = False
    hangout_link: str | None = None
    sync_status: str = "pending"
    source: CalendarSource | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("start_at", "end_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value):
        return parse_timestamp(value)

    @field_validator("is_all_day", "ignore", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        return bool(value)

    @field_validator("origin", mode="before")
    @classmethod
    def _normalise_origin(cls, value):
        return "kazador" if value == "kazador" else "google"

    @field_validator("sync_status", mode="before")
    @classmethod
    def _normalise_sync_status(cls, value):
        return value if value in SYNC_STATUSES else "pending"

    @field_validator("raw", mode="before")
    @classmethod
    def _default_raw(cls, value):
        return value if isinstance(value, dict) else {}

    @property
    def title(self) -> str:
        return self.summary or "Untitled event"

    @property
    def html_link(self) -> str | None:
        """Deep link into the provider's calendar UI."""
        link = self.raw.get("htmlLink")
        return link if isinstance(link, str) else None

    @property
    def meeting_url(self) -> str | None:
        """
        Resolve a join link for the event.

        Checks conference entry points, then the hangout link, then any
        Zoom/Meet/Teams URL in the description or location.
        """
        conference = self.raw.get("conferenceData")
        if isinstance(conference, dict):
            for point in conference.get("entryPoints") or []:
                if isinstance(point, dict) and point.get("uri"):
                    return point["uri"]
        if self.hangout_link:
            return self.hangout_link
        for text in (self.description or "", self.location or ""):
            for pattern in MEETING_URL_PATTERNS:
                match = pattern.search(text)
                if match:
                    return match.group(0)
        return None
