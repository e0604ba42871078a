"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("KAZADOR_DB_PATH", PROJECT_ROOT / "data" / "db" / "kazador-requests.db"))

# =============================================================================
# REMOTE BACKEND (from environment)
# =============================================================================

BACKEND_URL = os.environ.get("BACKEND_URL", "").rstrip("/")
BACKEND_TIMEOUT_SECONDS = float(os.environ.get("BACKEND_TIMEOUT_SECONDS", "15"))
SCRIPT_ACCESS_TOKEN = os.environ.get("KAZADOR_ACCESS_TOKEN", "")  # Used by CLI scripts only

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "UTC")

VIEW_MODES = ("month", "week", "day")
DEFAULT_VIEW = "week"

MIN_EVENT_HEIGHT_PERCENT = 6.0
DEFAULT_EVENT_DURATION_MINUTES = 30

CALENDAR_EVENT_LIMIT = 500  # Backend caps event pages at 500 rows
EVENT_LOOKBACK_DAYS = 7  # Multi-day events starting this far before a view still show
ASSIGNED_FILTERS = {"all", "assigned", "unassigned"}

SYNC_STATUSES = {"pending", "synced", "failed", "deleted", "needs_update", "delete_pending"}

# =============================================================================
# HOME / DIGEST CONFIGURATION
# =============================================================================

RECENT_EMAIL_LIMIT = 25
EMAIL_WIDGET_LIMIT = 10
TOP_ACTIONS_LIMIT = 4
TIMELINE_ACTIONS_LIMIT = 5

# Window value -> lookback in hours (None means no cutoff)
EMAIL_WINDOWS = {
    "24h": 24,
    "72h": 72,
    "all": None,
}
DEFAULT_EMAIL_WINDOW = "24h"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
REQUEST_LOG_ENABLED = os.environ.get("REQUEST_LOG_ENABLED", "false").lower() == "true"
ADMIN_SEARCH_LIMIT = 50
API_VERSION = "1.0.0"
