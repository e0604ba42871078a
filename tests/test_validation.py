"""Unit tests for form validation and event payload building."""

from zoneinfo import ZoneInfo

import pytest

from core.validation import (
    ValidationError,
    build_event_payload,
    validate_event_form,
    validate_project_update,
    validate_task_form,
    validate_timeline_item_form,
)
from models.forms import CalendarEventForm, ProjectUpdateForm, TaskForm, TimelineItemForm

UTC = ZoneInfo("UTC")


class TestEventForm:
    def test_valid_timed_event(self):
        form = CalendarEventForm(summary="Load-in", date="2024-03-05", time="09:00")

        assert validate_event_form(form) == []

    def test_reports_every_problem(self):
        form = CalendarEventForm(summary="  ", date="05/03/2024", time="9am")

        errors = validate_event_form(form)

        assert len(errors) == 3
        assert "Summary is required" in errors

    def test_all_day_event_needs_no_time(self):
        form = CalendarEventForm(summary="Festival", date="2024-07-01", all_day=True)

        assert validate_event_form(form) == []

    def test_end_time_must_follow_start(self):
        form = CalendarEventForm(summary="Call", date="2024-03-05", time="10:00", end_time="09:30")

        assert validate_event_form(form) == ["End time must be after start time"]

    def test_accepts_camel_case_fields(self):
        form = CalendarEventForm.model_validate(
            {"summary": "Call", "date": "2024-03-05", "time": "10:00", "endTime": "11:00", "allDay": False}
        )

        assert form.end_time == "11:00"


class TestBuildEventPayload:
    def test_timed_event_defaults_to_one_hour(self):
        form = CalendarEventForm(summary=" Load-in ", date="2024-03-05", time="09:00", location="Dock 2")

        payload = build_event_payload(form, UTC)

        assert payload == {
            "summary": "Load-in",
            "startAt": "2024-03-05T09:00:00+00:00",
            "endAt": "2024-03-05T10:00:00+00:00",
            "isAllDay": False,
            "timezone": "UTC",
            "location": "Dock 2",
        }

    def test_explicit_end_time(self):
        form = CalendarEventForm(summary="Call", date="2024-03-05", time="09:00", end_time="09:45")

        payload = build_event_payload(form, UTC)

        assert payload["endAt"] == "2024-03-05T09:45:00+00:00"

    def test_all_day_event_spans_midnight_to_midnight(self):
        form = CalendarEventForm(summary="Festival", date="2024-07-01", all_day=True, project_id="p1")

        payload = build_event_payload(form, UTC)

        assert payload["startAt"] == "2024-07-01T00:00:00+00:00"
        assert payload["endAt"] == "2024-07-02T00:00:00+00:00"
        assert payload["isAllDay"] is True
        assert payload["projectId"] == "p1"

    def test_local_time_carries_display_offset(self):
        form = CalendarEventForm(summary="Show", date="2024-03-10", time="12:00")

        payload = build_event_payload(form, ZoneInfo("America/New_York"))

        assert payload["startAt"] == "2024-03-10T12:00:00-04:00"
        assert payload["timezone"] == "America/New_York"

    def test_invalid_form_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            build_event_payload(CalendarEventForm(summary="Call"), UTC)

        assert "Date is required" in exc_info.value.errors


class TestOtherForms:
    def test_task_requires_title_unless_partial(self):
        assert validate_task_form(TaskForm()) == ["Task title is required"]
        assert validate_task_form(TaskForm(status="done"), partial=True) == []

    def test_task_rejects_unknown_status_and_bad_due_date(self):
        errors = validate_task_form(TaskForm(title="Book hotel", status="later", due_at="tomorrow"))

        assert len(errors) == 2

    def test_timeline_item_end_before_start(self):
        form = TimelineItemForm(
            title="Tour leg",
            type="event",
            starts_at="2024-05-02T00:00:00Z",
            ends_at="2024-05-01T00:00:00Z",
        )

        assert validate_timeline_item_form(form) == ["End must not be before start"]

    def test_timeline_item_calendar_sync_needs_source(self):
        form = TimelineItemForm(title="Gig", type="event", sync_to_calendar=True)

        assert validate_timeline_item_form(form) == ["Choose a calendar to sync this item to"]

    def test_project_update_date_order(self):
        form = ProjectUpdateForm(start_date="2024-06-01", end_date="2024-05-01")

        assert validate_project_update(form) == ["Project end date must not be before start date"]
