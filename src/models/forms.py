"""
Inbound form payloads submitted from the dashboard.

Fields are kept loose (mostly optional strings) so that validation can
report every problem at once instead of failing on the first.
"""

from models.base import Record


class CalendarEventForm(Record):
    summary: str | None = None
    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # HH:MM, omitted for all-day events
    end_time: str | None = None  # HH:MM, defaults to time + 60 minutes
    all_day: bool = False
    location: str | None = None
    description: str | None = None
    source_id: str | None = None
    project_id: str | None = None


class TaskForm(Record):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_at: str | None = None
    priority: int | None = None
    assignee_id: str | None = None


class TimelineItemForm(Record):
    title: str | None = None
    type: str | None = None
    starts_at: str | None = None
    ends_at: str | None = None
    lane: str | None = None
    territory: str | None = None
    status: str | None = None
    priority: int | None = None
    sync_to_calendar: bool = False
    calendar_source_id: str | None = None


class ProjectUpdateForm(Record):
    name: str | None = None
    description: str | None = None
    status: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    color: str | None = None


class ApprovalDecisionForm(Record):
    decision: str | None = None
    note: str | None = None


class AdminUserUpdateForm(Record):
    full_name: str | None = None
    role: str | None = None


class EventAssignmentForm(Record):
    project_id: str | None = None  # None clears the assignment


class EventIgnoreForm(Record):
    ignore: bool = True


class DependencyForm(Record):
    from_item_id: str
    to_item_id: str
    kind: str = "FS"
    note: str | None = None
