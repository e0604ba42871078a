"""
Projects, tasks, timeline items, dependencies and approvals.

Records are owned by the backend; these helpers fetch, submit and reshape
them for display.
"""

import logging

from core.backend_client import BackendClient
from core.calendar_grid import DateRange
from core.validation import (
    APPROVAL_DECISIONS,
    ValidationError,
    ensure_valid,
    validate_project_update,
    validate_task_form,
    validate_timeline_item_form,
)
from models.events import CalendarEvent
from models.forms import ApprovalDecisionForm, ProjectUpdateForm, TaskForm, TimelineItemForm
from models.projects import (
    Approval,
    Project,
    ProjectHub,
    ProjectListItem,
    ProjectTask,
    TimelineDependency,
    TimelineExplorer,
    TimelineItem,
)

logger = logging.getLogger(__name__)


def _form_body(form) -> dict:
    return form.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# PROJECTS
# =============================================================================


async def list_projects(
    backend: BackendClient, status: str | None = None, query: str | None = None
) -> list[ProjectListItem]:
    payload = await backend.get(
        "/api/projects",
        params={"status": status, "q": query},
        default_error="Failed to fetch projects",
    )
    return [ProjectListItem.model_validate(row) for row in payload.get("projects") or []]


async def get_project_hub(backend: BackendClient, project_id: str) -> ProjectHub:
    payload = await backend.get(
        f"/api/projects/{project_id}",
        default_error="Failed to load project hub",
    )
    return ProjectHub.model_validate(payload)


async def update_project(backend: BackendClient, project_id: str, form: ProjectUpdateForm) -> Project:
    ensure_valid(validate_project_update(form))
    payload = await backend.patch(
        f"/api/projects/{project_id}",
        json=_form_body(form),
        default_error="Failed to update project",
    )
    return Project.model_validate(payload.get("project") or {})


# =============================================================================
# TASKS
# =============================================================================


async def list_tasks(backend: BackendClient, project_id: str) -> list[ProjectTask]:
    payload = await backend.get(
        f"/api/projects/{project_id}/tasks",
        default_error="Failed to load tasks",
    )
    return [ProjectTask.model_validate(row) for row in payload.get("tasks") or []]


async def create_task(backend: BackendClient, project_id: str, form: TaskForm) -> ProjectTask:
    ensure_valid(validate_task_form(form))
    payload = await backend.post(
        f"/api/projects/{project_id}/tasks",
        json=_form_body(form),
        default_error="Failed to create task",
    )
    return ProjectTask.model_validate(payload.get("task") or {})


async def update_task(backend: BackendClient, project_id: str, task_id: str, form: TaskForm) -> ProjectTask:
    ensure_valid(validate_task_form(form, partial=True))
    payload = await backend.patch(
        f"/api/projects/{project_id}/tasks/{task_id}",
        json=_form_body(form),
        default_error="Failed to update task",
    )
    return ProjectTask.model_validate(payload.get("task") or {})


async def delete_task(backend: BackendClient, project_id: str, task_id: str) -> None:
    await backend.delete(
        f"/api/projects/{project_id}/tasks/{task_id}",
        default_error="Failed to delete task",
    )


# =============================================================================
# TIMELINE
# =============================================================================


async def create_timeline_item(backend: BackendClient, project_id: str, form: TimelineItemForm) -> TimelineItem:
    ensure_valid(validate_timeline_item_form(form))
    payload = await backend.post(
        f"/api/projects/{project_id}/timeline",
        json=_form_body(form),
        default_error="Failed to create timeline item",
    )
    return TimelineItem.model_validate(payload.get("item") or {})


async def update_timeline_item(
    backend: BackendClient, project_id: str, item_id: str, form: TimelineItemForm
) -> TimelineItem:
    ensure_valid(validate_timeline_item_form(form, partial=True))
    payload = await backend.patch(
        f"/api/projects/{project_id}/timeline/{item_id}",
        json=_form_body(form),
        default_error="Failed to update timeline item",
    )
    return TimelineItem.model_validate(payload.get("item") or {})


async def delete_timeline_item(backend: BackendClient, project_id: str, item_id: str) -> None:
    await backend.delete(
        f"/api/projects/{project_id}/timeline/{item_id}",
        default_error="Failed to delete timeline item",
    )


async def list_dependencies(backend: BackendClient, project_id: str) -> list[TimelineDependency]:
    payload = await backend.get(
        f"/api/projects/{project_id}/timeline/dependencies",
        default_error="Failed to load timeline dependencies",
    )
    return [TimelineDependency.model_validate(row) for row in payload.get("dependencies") or []]


async def create_dependency(
    backend: BackendClient,
    project_id: str,
    from_item_id: str,
    to_item_id: str,
    kind: str = "FS",
    note: str | None = None,
) -> TimelineDependency:
    if from_item_id == to_item_id:
        raise ValidationError(["A timeline item cannot depend on itself"])
    payload = await backend.post(
        f"/api/projects/{project_id}/timeline/dependencies",
        json={"fromItemId": from_item_id, "toItemId": to_item_id, "kind": kind, "note": note},
        default_error="Failed to create dependency",
    )
    return TimelineDependency.model_validate(payload.get("dependency") or {})


def item_sort_key(item: TimelineItem) -> tuple:
    """Chronological by start (then due, then end); undated items last."""
    when = item.starts_at or item.due_at or item.ends_at
    if when is None:
        return (1, 0.0, item.title)
    return (0, when.timestamp(), item.title)


def filter_timeline_items(
    items: list[TimelineItem],
    lane: str | None = None,
    date_range: DateRange | None = None,
) -> list[TimelineItem]:
    """
    Narrow timeline items to one lane and the visible range.

    Undated items are kept (they render in the "unscheduled" tray) and the
    result is sorted chronologically with undated items last.
    """
    result = []
    for item in items:
        if lane and (item.lane_name or "").lower() != lane.lower():
            continue
        if date_range is not None and not _overlaps(item, date_range):
            continue
        result.append(item)
    return sorted(result, key=item_sort_key)


def _overlaps(item: TimelineItem, date_range: DateRange) -> bool:
    start = item.starts_at or item.due_at or item.ends_at
    end = item.ends_at or item.due_at or item.starts_at
    if start is None or end is None:
        return True
    if start.tzinfo is None:
        start = start.replace(tzinfo=date_range.start.tzinfo)
    if end.tzinfo is None:
        end = end.replace(tzinfo=date_range.start.tzinfo)
    return end >= date_range.start and start < date_range.end


async def explore_timeline(
    backend: BackendClient,
    project_id: str,
    lane: str | None = None,
    date_range: DateRange | None = None,
) -> TimelineExplorer:
    """Load one project's timeline and filter it for display."""
    payload = await backend.get(
        "/api/timeline",
        params={
            "projectId": project_id,
            "lanes": lane,
            "rangeStart": date_range.start.isoformat() if date_range else None,
            "rangeEnd": date_range.end.isoformat() if date_range else None,
        },
        default_error="Failed to load timeline",
    )
    explorer = TimelineExplorer.model_validate(payload)
    explorer.items = filter_timeline_items(explorer.items, lane=lane, date_range=date_range)
    return explorer


def _extract_location(item: TimelineItem) -> str | None:
    city = item.labels.get("city")
    territory = item.labels.get("territory")
    if city and territory:
        return f"{city}, {territory}"
    if city:
        return str(city)
    return None


def _extract_meeting_url(item: TimelineItem) -> str | None:
    url = item.links.get("meetingUrl") or item.labels.get("meetingUrl")
    return url if isinstance(url, str) else None


def timeline_item_to_event(item: TimelineItem) -> CalendarEvent:
    """Render a timeline item on the calendar grid."""
    return CalendarEvent(
        id=item.id,
        summary=item.title,
        start_at=item.starts_at,
        end_at=item.ends_at or item.due_at,
        status=item.status,
        origin="kazador",
        assigned_project_id=item.project_id,
        location=_extract_location(item),
        hangout_link=_extract_meeting_url(item),
        raw={"kind": "timeline", "type": item.type, "lane": item.lane_name},
    )


def task_to_event(task: ProjectTask) -> CalendarEvent:
    """Render a task as a point-in-time entry at its due date."""
    return CalendarEvent(
        id=f"task:{task.id}",
        summary=task.title,
        start_at=None,
        end_at=task.due_at,
        status=task.status,
        origin="kazador",
        assigned_project_id=task.project_id,
        raw={"kind": "task", "taskId": task.id, "lane": task.lane_slug},
    )


def explorer_events(explorer: TimelineExplorer) -> list[CalendarEvent]:
    events = [timeline_item_to_event(item) for item in explorer.items]
    events.extend(task_to_event(task) for task in explorer.tasks if task.due_at)
    return events


# =============================================================================
# APPROVALS
# =============================================================================


async def list_approvals(
    backend: BackendClient, project_id: str | None = None, status: str | None = "pending"
) -> list[Approval]:
    payload = await backend.get(
        "/api/approvals",
        params={"projectId": project_id, "status": status},
        default_error="Failed to load approvals",
    )
    return [Approval.model_validate(row) for row in payload.get("approvals") or []]


async def decide_approval(backend: BackendClient, approval_id: str, form: ApprovalDecisionForm) -> Approval:
    if form.decision not in APPROVAL_DECISIONS:
        raise ValidationError([f"Decision must be one of: {', '.join(sorted(APPROVAL_DECISIONS))}"])
    payload = await backend.post(
        f"/api/approvals/{approval_id}/decision",
        json=_form_body(form),
        default_error="Failed to record approval decision",
    )
    approval = Approval.model_validate(payload.get("approval") or {})
    logger.info("Approval %s marked %s", approval.id, approval.status)
    return approval


def pending_approval_count(approvals: list[Approval]) -> int:
    return sum(1 for approval in approvals if approval.status == "pending")
