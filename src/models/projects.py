"""
Project records. Fetched wholesale from the backend and rendered.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from models.base import Record, parse_timestamp


class Project(Record):
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    status: str = "active"
    start_date: str | None = None
    end_date: str | None = None
    color: str | None = None
    labels: dict[str, Any] = Field(default_factory=dict)


class ProjectListItem(Record):
    project: Project
    role: str | None = None


class ProjectTask(Record):
    id: str
    project_id: str
    title: str
    description: str | None = None
    status: str = "todo"
    due_at: datetime | None = None
    priority: int | None = None
    assignee_id: str | None = None
    lane_slug: str | None = None

    @field_validator("due_at", mode="before")
    @classmethod
    def _lenient_due(cls, value):
        return parse_timestamp(value)


class TimelineItem(Record):
    """Project-scoped dated entity (event, milestone, task, hold, lead, gate)."""

    id: str
    project_id: str
    type: str = "event"
    title: str
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    due_at: datetime | None = None
    lane: str | None = None
    territory: str | None = None
    status: str | None = None
    priority: int | None = None
    labels: dict[str, Any] = Field(default_factory=dict)
    links: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("starts_at", "ends_at", "due_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value):
        return parse_timestamp(value)

    @field_validator("labels", "links", "metadata", mode="before")
    @classmethod
    def _default_mapping(cls, value):
        return value if isinstance(value, dict) else {}

    @property
    def lane_name(self) -> str | None:
        if self.lane:
            return self.lane
        lane = self.labels.get("lane")
        return str(lane) if lane else None


class TimelineDependency(Record):
    id: str
    project_id: str
    from_item_id: str
    to_item_id: str
    kind: str = "FS"
    note: str | None = None


class Approval(Record):
    id: str
    project_id: str | None = None
    type: str = "generic"
    status: str = "pending"
    payload: dict[str, Any] = Field(default_factory=dict)
    requested_by: str | None = None
    resolution_note: str | None = None
    created_at: str | None = None


class ProjectHub(Record):
    """Everything the project page renders for one project."""

    project: Project
    timeline_items: list[TimelineItem] = Field(default_factory=list)
    tasks: list[ProjectTask] = Field(default_factory=list)
    stats: dict[str, float] = Field(default_factory=dict)


class TimelineExplorer(Record):
    project: Project | None = None
    items: list[TimelineItem] = Field(default_factory=list)
    tasks: list[ProjectTask] = Field(default_factory=list)
    dependencies: list[TimelineDependency] = Field(default_factory=list)
