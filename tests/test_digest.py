"""Unit tests for digest filtering and the home overview."""

import asyncio
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from core.backend_client import BackendError
from models.digest import DigestTopAction, Email
from services.digest import (
    build_home_overview,
    email_label_options,
    fetch_digest_history,
    fetch_today_events,
    filter_emails,
    format_trend,
    timeline_actions,
)

UTC = ZoneInfo("UTC")
NOW = datetime(2024, 3, 5, 12, 0, tzinfo=UTC)


def _email(email_id: str, hours_ago: float | None, category: str = "booking", **kwargs) -> Email:
    received = (NOW - timedelta(hours=hours_ago)).isoformat() if hours_ago is not None else None
    return Email(id=email_id, from_email=f"{email_id}@example.com", received_at=received, category=category, **kwargs)


def _action(action_id: str, entity_type: str) -> dict:
    return {"id": action_id, "entityType": entity_type, "title": f"Action {action_id}", "score": 1.0}


class TestFilterEmails:
    def test_window_excludes_older_and_undated(self):
        emails = [_email("a", 1), _email("b", 30), _email("c", None), _email("d", 70)]

        assert [e.id for e in filter_emails(emails, "24h", now=NOW)] == ["a"]
        assert [e.id for e in filter_emails(emails, "72h", now=NOW)] == ["a", "b", "d"]

    def test_all_window_keeps_undated(self):
        emails = [_email("a", 1), _email("c", None)]

        assert [e.id for e in filter_emails(emails, "all", now=NOW)] == ["a", "c"]

    def test_label_filter(self):
        emails = [_email("a", 1, "booking"), _email("b", 2, "fan_mail"), _email("c", 3, "booking")]

        assert [e.id for e in filter_emails(emails, "all", "booking", now=NOW)] == ["a", "c"]

    def test_caps_at_ten(self):
        emails = [_email(str(i), 1) for i in range(15)]

        assert len(filter_emails(emails, "24h", now=NOW)) == 10

    def test_unparseable_received_at_is_treated_as_undated(self):
        email = Email(id="x", from_email="x@example.com", received_at="yesterday-ish")

        assert email.received_at is None
        assert filter_emails([email], "24h", now=NOW) == []


class TestDisplayHelpers:
    def test_label_options_sorted_and_unique(self):
        emails = [_email("a", 1, "fan_mail"), _email("b", 1, "booking"), _email("c", 1, "fan_mail")]

        assert email_label_options(emails) == ["booking", "fan_mail"]

    def test_timeline_actions_first_five(self):
        actions = [DigestTopAction.model_validate(_action(str(i), "timeline" if i % 2 else "task")) for i in range(14)]

        result = timeline_actions(actions)

        assert [a.id for a in result] == ["1", "3", "5", "7", "9"]

    def test_format_trend(self):
        assert format_trend("improving") == "Improving"
        assert format_trend("sideways") == "sideways"
        assert format_trend(None) == "—"

    def test_sender(self):
        assert _email("a", 1, from_name="Ana").sender == "Ana • a@example.com"
        assert _email("b", 1).sender == "b@example.com"


class TestHomeOverview:
    """Concurrent panel loading against the in-memory backend."""

    def _seed(self, fake_backend):
        fake_backend.digest = {
            "digest": {
                "generatedAt": NOW.isoformat(),
                "topActions": [_action(str(i), "timeline" if i < 3 else "task") for i in range(6)],
                "projects": [
                    {"project": {"id": "p1", "name": "Spring Tour"}, "metrics": {"trend": "slipping"}},
                ],
                "meta": {"totalProjects": 1},
            },
            "preferences": {"digestFrequency": "daily"},
            "generatedFor": "2024-03-05",
        }
        fake_backend.emails = [
            {"id": "m1", "fromEmail": "promoter@example.com", "subject": "Offer", "receivedAt": "2024-03-05T10:00:00Z", "category": "booking"},
            {"id": "m2", "fromEmail": "fan@example.com", "subject": "Hi", "receivedAt": "2024-03-01T10:00:00Z", "category": "fan_mail"},
        ]
        fake_backend.events = [
            {"id": "late", "summary": "Show", "startAt": "2024-03-05T20:00:00Z", "endAt": "2024-03-05T22:00:00Z"},
            {"id": "early", "summary": "Soundcheck", "startAt": "2024-03-05T15:00:00Z", "endAt": "2024-03-05T16:00:00Z"},
            {"id": "tomorrow", "summary": "Travel", "startAt": "2024-03-06T08:00:00Z", "endAt": "2024-03-06T10:00:00Z"},
        ]

    def test_all_panels_load(self, fake_backend):
        self._seed(fake_backend)

        overview = asyncio.run(build_home_overview(fake_backend.client(), UTC, window="24h", now=NOW))

        assert overview.digest.error is None
        assert [a.id for a in overview.top_actions] == ["0", "1", "2", "3"]
        assert [a.id for a in overview.timeline_actions] == ["0", "1", "2"]
        assert [e.id for e in overview.emails.data] == ["m1"]
        assert overview.label_options == ["booking", "fan_mail"]
        assert [e.id for e in overview.today_events.data] == ["early", "late"]
        assert overview.filters == {"window": "24h", "label": "all"}

    def test_failed_panel_does_not_block_others(self, fake_backend):
        self._seed(fake_backend)
        fake_backend.fail("/api/emails", 500, "Inbox unavailable")

        overview = asyncio.run(build_home_overview(fake_backend.client(), UTC, now=NOW))

        assert overview.emails.data == []
        assert overview.emails.error == "Inbox unavailable"
        assert overview.label_options == []
        assert overview.digest.error is None
        assert len(overview.today_events.data) == 2

    def test_failed_digest_leaves_empty_actions(self, fake_backend):
        self._seed(fake_backend)
        fake_backend.fail("/api/digest/today", 503, "Digest is being generated")

        overview = asyncio.run(build_home_overview(fake_backend.client(), UTC, now=NOW))

        assert overview.digest.error == "Digest is being generated"
        assert overview.top_actions == []
        assert overview.timeline_actions == []
        assert [e.id for e in overview.emails.data] == ["m1"]

    def test_today_includes_events_carried_over_from_last_night(self, fake_backend):
        fake_backend.events = [
            {"id": "overnight", "summary": "Load-out", "startAt": "2024-03-04T20:00:00Z", "endAt": "2024-03-05T02:00:00Z"},
            {"id": "yesterday", "summary": "Interview", "startAt": "2024-03-04T10:00:00Z", "endAt": "2024-03-04T11:00:00Z"},
            {"id": "noon", "summary": "Lunch", "startAt": "2024-03-05T12:00:00Z", "endAt": "2024-03-05T13:00:00Z"},
        ]

        events = asyncio.run(fetch_today_events(fake_backend.client(), UTC, now=NOW))

        assert [e.id for e in events] == ["overnight", "noon"]
        assert fake_backend.requests[-1].url.params["rangeStart"].startswith("2024-02-27")

    def test_digest_history_error(self, fake_backend):
        fake_backend.fail("/api/digests", 404, "No digests yet")

        with pytest.raises(BackendError) as exc_info:
            asyncio.run(fetch_digest_history(fake_backend.client()))

        assert exc_info.value.message == "No digests yet"
