"""Pydantic response models for API endpoints."""

from datetime import tzinfo
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from core.calendar_grid import DayPosition, day_key, is_all_day, iso_week_number, to_local
from models.admin import AdminUser
from models.base import Record
from models.digest import DigestRecord, DigestTopAction, Email, TodayDigest
from models.events import CalendarEvent, CalendarSourceSummary
from models.projects import Approval, Project, ProjectListItem, ProjectTask, TimelineDependency, TimelineItem
from services.calendar import CalendarDay, CalendarView

T = TypeVar("T")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    backend_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BACKEND_ERROR = "BACKEND_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# CALENDAR
# =============================================================================


class EventPosition(Record):
    top_percent: float
    height_percent: float
    continues_before: bool
    continues_after: bool

    @classmethod
    def from_position(cls, position: DayPosition) -> "EventPosition":
        return cls(
            top_percent=round(position.top_percent, 4),
            height_percent=round(position.height_percent, 4),
            continues_before=position.continues_before,
            continues_after=position.continues_after,
        )


class CalendarEventResponse(Record):
    """An event as the dashboard renders it, in the display timezone."""

    id: str
    summary: str
    date: str | None = None
    time: str | None = None
    end_date: str | None = None
    end_time: str | None = None
    all_day: bool = False
    location: str | None = None
    description: str | None = None
    meeting_url: str | None = None
    html_link: str | None = None
    origin: str = "google"
    project_id: str | None = None
    source_id: str | None = None
    sync_status: str = "pending"
    ignore: bool = False
    position: EventPosition | None = None

    @classmethod
    def from_event(
        cls, event: CalendarEvent, tz: tzinfo, position: DayPosition | None = None
    ) -> "CalendarEventResponse":
        all_day = is_all_day(event, tz)
        start = to_local(event.start_at, tz) if event.start_at else None
        end = to_local(event.end_at, tz) if event.end_at else None
        return cls(
            id=event.id,
            summary=event.title,
            date=day_key(start.date()) if start else None,
            time=start.strftime("%H:%M") if start and not all_day else None,
            end_date=day_key(end.date()) if end else None,
            end_time=end.strftime("%H:%M") if end and not all_day else None,
            all_day=all_day,
            location=event.location,
            description=event.description,
            meeting_url=event.meeting_url,
            html_link=event.html_link,
            origin=event.origin,
            project_id=event.assigned_project_id,
            source_id=event.source_id,
            sync_status=event.sync_status,
            ignore=event.ignore,
            position=EventPosition.from_position(position) if position else None,
        )


class CalendarDayResponse(Record):
    date: str
    is_today: bool
    in_focus: bool
    all_day: list[CalendarEventResponse] = Field(default_factory=list)
    timed: list[CalendarEventResponse] = Field(default_factory=list)

    @classmethod
    def from_day(cls, day: CalendarDay, tz: tzinfo) -> "CalendarDayResponse":
        return cls(
            date=day.key,
            is_today=day.is_today,
            in_focus=day.in_focus,
            all_day=[CalendarEventResponse.from_event(e, tz) for e in day.all_day],
            timed=[CalendarEventResponse.from_event(p.event, tz, p.position) for p in day.timed],
        )


class CalendarViewResponse(Record):
    view: str
    anchor: str
    label: str
    range_start: str
    range_end: str
    previous_anchor: str
    next_anchor: str
    total_events: int
    days: list[CalendarDayResponse]
    week_numbers: list[int] = Field(default_factory=list)  # ISO week per grid row
    query: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_view(cls, view: CalendarView, tz: tzinfo, query: dict[str, str]) -> "CalendarViewResponse":
        return cls(
            view=view.view,
            anchor=view.anchor.isoformat(),
            label=view.label,
            range_start=view.range.start.isoformat(),
            range_end=view.range.end.isoformat(),
            previous_anchor=view.previous_anchor.isoformat(),
            next_anchor=view.next_anchor.isoformat(),
            total_events=view.total_events,
            days=[CalendarDayResponse.from_day(day, tz) for day in view.days],
            week_numbers=[iso_week_number(week[-1].day) for week in view.weeks],
            query=query,
        )


class EventListResponse(Record):
    events: list[CalendarEventResponse]
    count: int


class CalendarSourceResponse(Record):
    id: str
    name: str
    kind: str | None = None
    project_id: str | None = None
    project_name: str | None = None

    @classmethod
    def from_summary(cls, entry: CalendarSourceSummary) -> "CalendarSourceResponse":
        return cls(
            id=entry.source.id,
            name=entry.source.display_name,
            kind=entry.source.kind,
            project_id=entry.project_id,
            project_name=entry.project.name if entry.project else None,
        )


class SyncResponse(Record):
    pulled: int
    message: str


# =============================================================================
# HOME / DIGEST
# =============================================================================


class Panel(Record, Generic[T]):
    data: T
    error: str | None = None


class EmailResponse(Record):
    id: str
    sender: str
    subject: str
    received_at: str | None = None
    category: str | None = None
    is_read: bool = False
    summary: str | None = None
    labels: list[str] = Field(default_factory=list)

    @classmethod
    def from_email(cls, email: Email) -> "EmailResponse":
        return cls(
            id=email.id,
            sender=email.sender,
            subject=email.subject,
            received_at=email.received_at.isoformat() if email.received_at else None,
            category=email.category,
            is_read=email.is_read,
            summary=email.summary,
            labels=email.labels,
        )


class HomeResponse(Record):
    digest: Panel[TodayDigest]
    top_actions: list[DigestTopAction]
    timeline_actions: list[DigestTopAction]
    project_trends: dict[str, str] = Field(default_factory=dict)
    emails: Panel[list[EmailResponse]]
    label_options: list[str]
    today_events: Panel[list[CalendarEventResponse]]
    filters: dict[str, Any] = Field(default_factory=dict)


class DigestHistoryResponse(Record):
    digests: list[DigestRecord]


# =============================================================================
# PROJECTS / TIMELINE / APPROVALS / ADMIN
# =============================================================================


class ProjectListResponse(Record):
    projects: list[ProjectListItem]


class ProjectResponse(Record):
    project: Project


class TaskListResponse(Record):
    tasks: list[ProjectTask]


class TaskResponse(Record):
    task: ProjectTask


class TimelineItemResponse(Record):
    item: TimelineItem


class DependencyListResponse(Record):
    dependencies: list[TimelineDependency]


class DependencyResponse(Record):
    dependency: TimelineDependency


class TimelineResponse(Record):
    project: Project | None = None
    range_start: str | None = None
    range_end: str | None = None
    items: list[TimelineItem]
    tasks: list[ProjectTask]
    dependencies: list[TimelineDependency]
    events: list[CalendarEventResponse]
    query: dict[str, str] = Field(default_factory=dict)


class ApprovalListResponse(Record):
    approvals: list[Approval]
    pending: int


class ApprovalResponse(Record):
    approval: Approval


class AdminUserListResponse(Record):
    users: list[AdminUser]


class AdminUserResponse(Record):
    user: AdminUser


class AdminProjectListResponse(Record):
    projects: list[Project]
