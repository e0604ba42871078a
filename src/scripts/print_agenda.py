#!/usr/bin/env python3
"""
Print a calendar view as a plain-text agenda.

Usage:
    KAZADOR_ACCESS_TOKEN=... python src/scripts/print_agenda.py --view week --date 2025-11-03
"""

import argparse
import asyncio
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.backend_client import BackendClient, close_http_client, get_http_client
from core.calendar_grid import month_weeks, resolve_timezone, to_local
from core.config import DEFAULT_VIEW, DISPLAY_TIMEZONE, SCRIPT_ACCESS_TOKEN, VIEW_MODES
from services.calendar import CalendarView, build_calendar_view


def print_month(view: CalendarView):
    """Compact month grid with per-day event counts."""
    by_day = {day.day: day for day in view.days}
    print("  Sun   Mon   Tue   Wed   Thu   Fri   Sat")
    for week in month_weeks(view.range):
        cells = []
        for d in week:
            cell = by_day[d]
            count = len(cell.all_day) + len(cell.timed)
            marker = f"{d.day:2d}" if cell.in_focus else "  "
            cells.append(f"{marker}({count})" if count else f"{marker}   ")
        print(" ".join(f"{c:5s}" for c in cells))


def print_agenda(view: CalendarView, tz):
    for day in view.days:
        if not day.all_day and not day.timed:
            continue
        marker = " (today)" if day.is_today else ""
        print(f"\n{day.day:%a %b %d}{marker}")
        for event in day.all_day:
            print(f"  all day  {event.title}")
        for positioned in day.timed:
            event = positioned.event
            start = to_local(event.start_at or event.end_at, tz)
            arrow = "…" if positioned.position.continues_before else " "
            print(f"  {start:%H:%M}{arrow} {event.title}")


async def main(view_mode: str, anchor: date, project_id: str | None):
    if not SCRIPT_ACCESS_TOKEN:
        print("Error: KAZADOR_ACCESS_TOKEN is not set")
        sys.exit(1)

    tz = resolve_timezone(DISPLAY_TIMEZONE)
    backend = BackendClient(get_http_client(), SCRIPT_ACCESS_TOKEN)
    try:
        view = await build_calendar_view(backend, view_mode, anchor, tz, project_id=project_id)
    finally:
        await close_http_client()

    print(f"{view.label}  ({view.total_events} events)")
    print("=" * 60)
    if view_mode == "month":
        print_month(view)
    print_agenda(view, tz)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print a calendar view as text")
    parser.add_argument("--view", choices=VIEW_MODES, default=DEFAULT_VIEW)
    parser.add_argument("--date", help="Anchor date (YYYY-MM-DD), defaults to today")
    parser.add_argument("--project", help="Only events assigned to this project id")
    args = parser.parse_args()

    if args.date:
        try:
            anchor = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            print(f"Error: Invalid date format '{args.date}'. Use YYYY-MM-DD")
            sys.exit(1)
    else:
        anchor = date.today()

    asyncio.run(main(args.view, anchor, args.project))
