"""
Form validation and payload building for dashboard submissions.
"""

from datetime import date, datetime, time, timedelta, tzinfo

from models.base import parse_timestamp
from models.forms import CalendarEventForm, ProjectUpdateForm, TaskForm, TimelineItemForm

DEFAULT_FORM_DURATION_MINUTES = 60

TASK_STATUSES = {"todo", "in_progress", "blocked", "done"}
TIMELINE_ITEM_TYPES = {"event", "milestone", "task", "hold", "lead", "gate"}
TIMELINE_STATUSES = {"planned", "tentative", "confirmed", "waiting", "done", "canceled"}
PROJECT_STATUSES = {"active", "paused", "archived"}
APPROVAL_DECISIONS = {"approve", "decline"}
ADMIN_ROLES = {"user", "admin"}


class ValidationError(ValueError):
    """One or more user-facing validation messages."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def _parse_date(value: str | None) -> date | None:
    try:
        return datetime.strptime(value or "", "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_time(value: str | None) -> time | None:
    try:
        return datetime.strptime(value or "", "%H:%M").time()
    except ValueError:
        return None


def validate_event_form(form: CalendarEventForm) -> list[str]:
    """
    Check a calendar event form.

    Checks:
    1. Summary and date are present and well-formed
    2. Timed events carry a valid start time
    3. An explicit end time falls after the start time
    """
    errors = []

    if not (form.summary or "").strip():
        errors.append("Summary is required")

    if not form.date:
        errors.append("Date is required")
    elif _parse_date(form.date) is None:
        errors.append(f"Invalid date '{form.date}', expected YYYY-MM-DD")

    if not form.all_day:
        start_time = _parse_time(form.time)
        if not form.time:
            errors.append("Start time is required for timed events")
        elif start_time is None:
            errors.append(f"Invalid time '{form.time}', expected HH:MM")

        if form.end_time:
            end_time = _parse_time(form.end_time)
            if end_time is None:
                errors.append(f"Invalid end time '{form.end_time}', expected HH:MM")
            elif start_time is not None and end_time <= start_time:
                errors.append("End time must be after start time")

    return errors


def build_event_payload(form: CalendarEventForm, tz: tzinfo) -> dict:
    """Validate the form and turn it into the backend's create-event body."""
    errors = validate_event_form(form)
    if errors:
        raise ValidationError(errors)

    day = _parse_date(form.date)
    if form.all_day:
        start = datetime.combine(day, time.min, tz)
        end = start + timedelta(days=1)
    else:
        start = datetime.combine(day, _parse_time(form.time), tz)
        if form.end_time:
            end = datetime.combine(day, _parse_time(form.end_time), tz)
        else:
            end = start + timedelta(minutes=DEFAULT_FORM_DURATION_MINUTES)

    payload = {
        "summary": form.summary.strip(),
        "startAt": start.isoformat(),
        "endAt": end.isoformat(),
        "isAllDay": form.all_day,
        "timezone": getattr(tz, "key", str(tz)),
    }
    if form.location:
        payload["location"] = form.location.strip()
    if form.description:
        payload["description"] = form.description
    if form.source_id:
        payload["sourceId"] = form.source_id
    if form.project_id:
        payload["projectId"] = form.project_id
    return payload


def validate_task_form(form: TaskForm, partial: bool = False) -> list[str]:
    errors = []
    if not partial and not (form.title or "").strip():
        errors.append("Task title is required")
    if partial and form.title is not None and not form.title.strip():
        errors.append("Task title cannot be empty")
    if form.status and form.status not in TASK_STATUSES:
        errors.append(f"Invalid task status '{form.status}'")
    if form.due_at and parse_timestamp(form.due_at) is None:
        errors.append(f"Invalid due date '{form.due_at}'")
    return errors


def validate_timeline_item_form(form: TimelineItemForm, partial: bool = False) -> list[str]:
    errors = []
    if not partial and not (form.title or "").strip():
        errors.append("Timeline item title is required")
    if not partial and not form.type:
        errors.append("Timeline item type is required")
    if form.type and form.type.lower() not in TIMELINE_ITEM_TYPES:
        errors.append(f"Invalid timeline item type '{form.type}'")
    if form.status and form.status not in TIMELINE_STATUSES:
        errors.append(f"Invalid timeline status '{form.status}'")

    starts_at = parse_timestamp(form.starts_at)
    ends_at = parse_timestamp(form.ends_at)
    if form.starts_at and starts_at is None:
        errors.append(f"Invalid start '{form.starts_at}'")
    if form.ends_at and ends_at is None:
        errors.append(f"Invalid end '{form.ends_at}'")
    if starts_at and ends_at:
        if (starts_at.tzinfo is None) != (ends_at.tzinfo is None):
            errors.append("Start and end must both include or both omit a timezone")
        elif ends_at < starts_at:
            errors.append("End must not be before start")

    if form.sync_to_calendar and not form.calendar_source_id:
        errors.append("Choose a calendar to sync this item to")
    return errors


def validate_project_update(form: ProjectUpdateForm) -> list[str]:
    errors = []
    if form.name is not None and not form.name.strip():
        errors.append("Project name cannot be empty")
    if form.status and form.status not in PROJECT_STATUSES:
        errors.append(f"Invalid project status '{form.status}'")
    for label, value in (("start date", form.start_date), ("end date", form.end_date)):
        if value and _parse_date(value) is None:
            errors.append(f"Invalid {label} '{value}', expected YYYY-MM-DD")
    if form.start_date and form.end_date:
        start, end = _parse_date(form.start_date), _parse_date(form.end_date)
        if start and end and end < start:
            errors.append("Project end date must not be before start date")
    return errors


def ensure_valid(errors: list[str]) -> None:
    if errors:
        raise ValidationError(errors)
