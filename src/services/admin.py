"""
Admin user and project management.
"""

import logging

from core.backend_client import BackendClient
from core.config import ADMIN_SEARCH_LIMIT
from core.validation import ADMIN_ROLES, ValidationError, ensure_valid, validate_project_update
from models.admin import AdminUser
from models.forms import AdminUserUpdateForm, ProjectUpdateForm
from models.projects import Project

logger = logging.getLogger(__name__)


async def search_users(backend: BackendClient, query: str | None = None) -> list[AdminUser]:
    """Search users by name or email; an empty query lists everyone."""
    query = (query or "").strip()
    payload = await backend.get(
        "/api/admin/users",
        params={"q": query, "limit": ADMIN_SEARCH_LIMIT},
        default_error="Failed to load users",
    )
    return [AdminUser.model_validate(row) for row in payload.get("users") or []]


async def update_user(backend: BackendClient, user_id: str, form: AdminUserUpdateForm) -> AdminUser:
    if form.role is not None and form.role not in ADMIN_ROLES:
        raise ValidationError([f"Invalid role '{form.role}'"])
    payload = await backend.patch(
        f"/api/admin/users/{user_id}",
        json=form.model_dump(by_alias=True, exclude_none=True),
        default_error="Failed to update user",
    )
    user = AdminUser.model_validate(payload.get("user") or {})
    logger.info("Admin updated user %s", user.id)
    return user


async def list_admin_projects(backend: BackendClient) -> list[Project]:
    payload = await backend.get("/api/admin/projects", default_error="Failed to load projects")
    return [Project.model_validate(row) for row in payload.get("projects") or []]


async def update_admin_project(backend: BackendClient, project_id: str, form: ProjectUpdateForm) -> Project:
    ensure_valid(validate_project_update(form))
    payload = await backend.patch(
        f"/api/admin/projects/{project_id}",
        json=form.model_dump(by_alias=True, exclude_none=True),
        default_error="Failed to update project",
    )
    return Project.model_validate(payload.get("project") or {})
