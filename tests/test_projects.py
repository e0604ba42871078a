"""Unit tests for timeline filtering, conversion and approvals."""

import asyncio
from datetime import date
from zoneinfo import ZoneInfo

import pytest

from core.calendar_grid import build_range
from core.validation import ValidationError
from models.forms import ApprovalDecisionForm
from models.projects import ProjectTask, TimelineItem
from services.projects import (
    create_dependency,
    decide_approval,
    explore_timeline,
    explorer_events,
    filter_timeline_items,
    list_approvals,
    pending_approval_count,
    task_to_event,
    timeline_item_to_event,
)

UTC = ZoneInfo("UTC")


def _item(item_id: str, starts_at=None, ends_at=None, lane=None, **kwargs) -> TimelineItem:
    return TimelineItem(
        id=item_id,
        project_id="p1",
        title=f"Item {item_id}",
        starts_at=starts_at,
        ends_at=ends_at,
        lane=lane,
        **kwargs,
    )


class TestFilterTimelineItems:
    def test_sorted_with_undated_last(self):
        items = [
            _item("undated"),
            _item("late", "2024-03-20T10:00:00Z"),
            _item("early", "2024-03-02T10:00:00Z"),
        ]

        assert [i.id for i in filter_timeline_items(items)] == ["early", "late", "undated"]

    def test_lane_filter_is_case_insensitive_and_reads_labels(self):
        items = [
            _item("a", "2024-03-02T10:00:00Z", lane="Live"),
            _item("b", "2024-03-03T10:00:00Z", labels={"lane": "live"}),
            _item("c", "2024-03-04T10:00:00Z", lane="Promo"),
        ]

        assert [i.id for i in filter_timeline_items(items, lane="LIVE")] == ["a", "b"]

    def test_range_filter_keeps_overlapping_and_undated(self):
        r = build_range(date(2024, 3, 5), "week", UTC)
        items = [
            _item("inside", "2024-03-05T10:00:00Z", "2024-03-05T12:00:00Z"),
            _item("spanning", "2024-02-25T00:00:00Z", "2024-03-04T00:00:00Z"),
            _item("outside", "2024-04-01T10:00:00Z"),
            _item("undated"),
        ]

        assert [i.id for i in filter_timeline_items(items, date_range=r)] == ["spanning", "inside", "undated"]


class TestCalendarConversion:
    def test_timeline_item_to_event(self):
        item = _item(
            "t1",
            "2024-03-05T19:00:00Z",
            "2024-03-05T22:00:00Z",
            lane="Live",
            type="event",
            labels={"city": "Lisbon", "territory": "PT"},
            links={"meetingUrl": "https://meet.google.com/abc-defg-hij"},
        )

        event = timeline_item_to_event(item)

        assert event.summary == "Item t1"
        assert event.origin == "kazador"
        assert event.assigned_project_id == "p1"
        assert event.location == "Lisbon, PT"
        assert event.meeting_url == "https://meet.google.com/abc-defg-hij"
        assert event.raw["lane"] == "Live"

    def test_task_to_event_sits_at_due_date(self):
        task = ProjectTask(id="k1", project_id="p1", title="Sign contract", due_at="2024-03-06T17:00:00Z")

        event = task_to_event(task)

        assert event.id == "task:k1"
        assert event.start_at is None
        assert event.end_at == task.due_at

    def test_explorer_events_skip_undated_tasks(self, fake_backend):
        fake_backend.timeline = {
            "project": {"id": "p1", "name": "Spring Tour"},
            "items": [{"id": "t1", "projectId": "p1", "title": "Show", "startsAt": "2024-03-05T19:00:00Z"}],
            "tasks": [
                {"id": "k1", "projectId": "p1", "title": "Advance", "dueAt": "2024-03-06T12:00:00Z"},
                {"id": "k2", "projectId": "p1", "title": "Someday"},
            ],
            "dependencies": [],
        }
        r = build_range(date(2024, 3, 5), "week", UTC)

        explorer = asyncio.run(explore_timeline(fake_backend.client(), "p1", date_range=r))

        assert explorer.project.name == "Spring Tour"
        assert [e.id for e in explorer_events(explorer)] == ["t1", "task:k1"]
        params = fake_backend.requests[-1].url.params
        assert params["projectId"] == "p1"
        assert params["rangeStart"] == r.start.isoformat()
        assert "lanes" not in params


class TestDependenciesAndApprovals:
    def test_self_dependency_rejected_before_any_request(self, fake_backend):
        with pytest.raises(ValidationError):
            asyncio.run(create_dependency(fake_backend.client(), "p1", "t1", "t1"))

        assert fake_backend.requests == []

    def test_unknown_decision_rejected(self, fake_backend):
        with pytest.raises(ValidationError):
            asyncio.run(decide_approval(fake_backend.client(), "a1", ApprovalDecisionForm(decision="maybe")))

    def test_approve(self, fake_backend):
        fake_backend.approvals = [
            {"id": "a1", "projectId": "p1", "type": "project_email_link", "status": "pending"},
            {"id": "a2", "projectId": "p1", "status": "pending"},
        ]
        approval = asyncio.run(
            decide_approval(fake_backend.client(), "a1", ApprovalDecisionForm(decision="approve", note="ok"))
        )
        approvals = asyncio.run(list_approvals(fake_backend.client(), project_id="p1"))

        assert approval.status == "approved"
        assert approval.resolution_note == "ok"
        assert pending_approval_count(approvals) == 1
