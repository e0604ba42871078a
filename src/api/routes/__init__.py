"""API route modules."""

from .admin import router as admin_router
from .approvals import router as approvals_router
from .calendar import router as calendar_router
from .health import router as health_router
from .home import router as home_router
from .projects import router as projects_router
from .timeline import router as timeline_router

__all__ = [
    "health_router",
    "calendar_router",
    "home_router",
    "projects_router",
    "timeline_router",
    "approvals_router",
    "admin_router",
]
