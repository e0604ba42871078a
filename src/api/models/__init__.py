"""API Pydantic models."""

from .responses import (
    CalendarEventResponse,
    CalendarViewResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    HomeResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CalendarEventResponse",
    "CalendarViewResponse",
    "HomeResponse",
]
