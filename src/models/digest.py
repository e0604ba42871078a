"""
Digest and inbox records. Computed server-side; displayed as-is.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from models.base import Record, parse_timestamp
from models.projects import Approval, Project


class Email(Record):
    id: str
    from_name: str | None = None
    from_email: str
    subject: str = ""
    received_at: datetime | None = None
    category: str | None = None
    is_read: bool = False
    summary: str | None = None
    labels: list[str] = Field(default_factory=list)
    priority_score: float | None = None

    @field_validator("received_at", mode="before")
    @classmethod
    def _lenient_received(cls, value):
        return parse_timestamp(value)

    @field_validator("labels", mode="before")
    @classmethod
    def _default_labels(cls, value):
        return value if isinstance(value, list) else []

    @property
    def sender(self) -> str:
        if self.from_name:
            return f"{self.from_name} • {self.from_email}"
        return self.from_email


class DigestTopAction(Record):
    id: str
    project_id: str | None = None
    entity_type: str
    title: str
    score: float = 0
    rationale: list[str] = Field(default_factory=list)
    due_at: str | None = None
    starts_at: str | None = None
    ends_at: str | None = None
    status: str | None = None
    project_name: str | None = None
    project_color: str | None = None


class ProjectDigestMetrics(Record):
    open_tasks: int = 0
    upcoming_timeline: int = 0
    linked_emails: int = 0
    conflicts: int = 0
    health_score: float = 0
    trend: str | None = None


class DigestProjectSnapshot(Record):
    project: Project
    metrics: ProjectDigestMetrics = Field(default_factory=ProjectDigestMetrics)
    top_actions: list[DigestTopAction] = Field(default_factory=list)
    approvals: list[Approval] = Field(default_factory=list)


class DigestMeta(Record):
    total_projects: int = 0
    total_pending_approvals: int = 0
    highlighted_projects: int = 0


class DigestPayload(Record):
    generated_at: str | None = None
    top_actions: list[DigestTopAction] = Field(default_factory=list)
    projects: list[DigestProjectSnapshot] = Field(default_factory=list)
    meta: DigestMeta = Field(default_factory=DigestMeta)


class UserPreferences(Record):
    digest_frequency: str = "daily"
    digest_hour: int = 8
    timezone: str = "UTC"
    channels: list[str] = Field(default_factory=lambda: ["web"])
    quiet_hours: dict[str, Any] | None = None


class TodayDigest(Record):
    digest: DigestPayload | None = None
    preferences: UserPreferences | None = None
    generated_for: str | None = None


class DigestRecord(Record):
    id: str
    generated_for: str
    channel: str = "web"
    status: str = "generated"
    payload: DigestPayload
    delivered_at: str | None = None
