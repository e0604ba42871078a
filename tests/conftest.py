"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src and tests to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from fixtures.fake_backend import FakeBackend  # noqa: E402
from models.events import CalendarEvent  # noqa: E402


@pytest.fixture
def make_event():
    """Factory for events from ISO strings."""

    def _make(event_id="evt-1", start=None, end=None, summary="Soundcheck", **kwargs):
        return CalendarEvent(id=event_id, summary=summary, start_at=start, end_at=end, **kwargs)

    return _make


@pytest.fixture
def sample_event(make_event):
    """A 09:00-10:30 meeting on 2024-03-05 UTC."""
    return make_event(start="2024-03-05T09:00:00Z", end="2024-03-05T10:30:00Z")


@pytest.fixture
def fake_backend():
    """In-memory stand-in for the remote backend."""
    return FakeBackend()
