"""Admin-panel records."""

from models.base import Record


class AdminUser(Record):
    id: str
    email: str | None = None
    full_name: str | None = None
    role: str | None = None
    created_at: str | None = None
