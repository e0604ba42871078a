"""
Shared base for records consumed from the remote backend.

The backend speaks camelCase JSON; records accept either spelling and
serialise back to camelCase for the dashboard.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Backend record: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp, returning None for empty or unparseable input."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
