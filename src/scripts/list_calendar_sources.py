#!/usr/bin/env python3
"""
List connected calendar sources and the projects they belong to.

Usage:
    KAZADOR_ACCESS_TOKEN=... python src/scripts/list_calendar_sources.py [--sync]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.backend_client import BackendClient, BackendError, close_http_client, get_http_client
from core.config import SCRIPT_ACCESS_TOKEN
from services.calendar import list_sources, sync_all_sources


async def main(sync: bool):
    """List all calendar sources, optionally pulling each one."""
    if not SCRIPT_ACCESS_TOKEN:
        print("Error: KAZADOR_ACCESS_TOKEN is not set")
        sys.exit(1)

    backend = BackendClient(get_http_client(), SCRIPT_ACCESS_TOKEN)
    try:
        print("Fetching calendar sources...\n")
        sources = await list_sources(backend)

        print(f"Found {len(sources)} calendars\n")
        print("=" * 80)

        for entry in sources:
            print(f"\nCalendar: {entry.source.display_name}")
            print(f"  ID: {entry.source.id}")
            if entry.source.external_id:
                print(f"  External ID: {entry.source.external_id}")
            if entry.project:
                print(f"  Project: {entry.project.name} ({entry.project.id})")
            else:
                print("  Project: None")
            print("-" * 80)

        if sync:
            print("\nSyncing calendars...")
            try:
                pulled = await sync_all_sources(backend)
                print(f"Synced {pulled} calendars")
            except BackendError as e:
                print(f"Error syncing calendars: {e.message}")
    finally:
        await close_http_client()

    print("\nDone!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List connected calendar sources")
    parser.add_argument("--sync", action="store_true", help="Pull every calendar after listing")
    args = parser.parse_args()
    asyncio.run(main(args.sync))
