"""Admin panel endpoints. The backend enforces the admin role."""

from fastapi import APIRouter, Depends

from api.dependencies import get_backend
from api.models.responses import AdminProjectListResponse, AdminUserListResponse, AdminUserResponse, ProjectResponse
from core.backend_client import BackendClient
from models.forms import AdminUserUpdateForm, ProjectUpdateForm
from services.admin import list_admin_projects, search_users, update_admin_project, update_user

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.get("/users", response_model=AdminUserListResponse)
async def get_users(q: str | None = None, backend: BackendClient = Depends(get_backend)):
    return AdminUserListResponse(users=await search_users(backend, q))


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
async def patch_user(user_id: str, form: AdminUserUpdateForm, backend: BackendClient = Depends(get_backend)):
    return AdminUserResponse(user=await update_user(backend, user_id, form))


@router.get("/projects", response_model=AdminProjectListResponse)
async def get_projects(backend: BackendClient = Depends(get_backend)):
    return AdminProjectListResponse(projects=await list_admin_projects(backend))


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def patch_project(project_id: str, form: ProjectUpdateForm, backend: BackendClient = Depends(get_backend)):
    return ProjectResponse(project=await update_admin_project(backend, project_id, form))
