"""
Generate randomised calendar events for grid property tests.
"""

import random
from datetime import datetime, timedelta, tzinfo

from faker import Faker

from models.events import CalendarEvent

# Durations in minutes, weighted toward ordinary meetings
DURATIONS = [15, 30, 45, 60, 90, 120, 180, 8 * 60, 26 * 60, 3 * 24 * 60]
DURATION_WEIGHTS = [5, 10, 5, 15, 5, 5, 3, 2, 2, 1]

LOCATIONS = [
    "Studio A",
    "Green room",
    "https://meet.google.com/abc-defg-hij",
    None,
]


def generate_events(
    count: int,
    window_start: datetime,
    window_days: int,
    tz: tzinfo,
    seed: int = 0,
) -> list[CalendarEvent]:
    """
    Build `count` events starting anywhere in a window, some all-day, some
    missing an end, and a few missing both timestamps.
    """
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)

    events = []
    for i in range(count):
        roll = rng.random()
        if roll < 0.05:
            start = end = None
            all_day = False
        elif roll < 0.2:
            day = window_start + timedelta(days=rng.randrange(window_days))
            start = datetime(day.year, day.month, day.day, tzinfo=tz)
            end = start + timedelta(days=rng.choice([1, 1, 2, 3]))
            all_day = True
        else:
            minute = rng.randrange(0, window_days * 24 * 60, 15)
            start = window_start + timedelta(minutes=minute)
            duration = rng.choices(DURATIONS, weights=DURATION_WEIGHTS)[0]
            end = None if rng.random() < 0.1 else start + timedelta(minutes=duration)
            all_day = False

        events.append(
            CalendarEvent(
                id=f"evt-{i:04d}",
                summary=fake.catch_phrase(),
                description=fake.sentence(),
                location=rng.choice(LOCATIONS),
                start_at=start.isoformat() if start else None,
                end_at=end.isoformat() if end else None,
                is_all_day=all_day,
                origin=rng.choice(["google", "kazador"]),
            )
        )
    return events
