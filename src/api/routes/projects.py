"""Project hub endpoints: projects, tasks, timeline items and dependencies."""

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_backend
from api.models.responses import (
    DependencyListResponse,
    DependencyResponse,
    ProjectListResponse,
    ProjectResponse,
    TaskListResponse,
    TaskResponse,
    TimelineItemResponse,
)
from core.backend_client import BackendClient
from models.forms import DependencyForm, ProjectUpdateForm, TaskForm, TimelineItemForm
from models.projects import ProjectHub
from services import projects as project_service

router = APIRouter(prefix="/v1/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    status_filter: str | None = Query(None, alias="status"),
    q: str | None = None,
    backend: BackendClient = Depends(get_backend),
):
    items = await project_service.list_projects(backend, status=status_filter, query=q)
    return ProjectListResponse(projects=items)


@router.get("/{project_id}", response_model=ProjectHub)
async def get_project(project_id: str, backend: BackendClient = Depends(get_backend)):
    """Project hub: the project with its timeline items, tasks and stats."""
    hub = await project_service.get_project_hub(backend, project_id)
    hub.timeline_items = project_service.filter_timeline_items(hub.timeline_items)
    return hub


@router.patch("/{project_id}", response_model=ProjectResponse)
async def patch_project(
    project_id: str,
    form: ProjectUpdateForm,
    backend: BackendClient = Depends(get_backend),
):
    project = await project_service.update_project(backend, project_id, form)
    return ProjectResponse(project=project)


# =============================================================================
# TASKS
# =============================================================================


@router.get("/{project_id}/tasks", response_model=TaskListResponse)
async def get_tasks(project_id: str, backend: BackendClient = Depends(get_backend)):
    return TaskListResponse(tasks=await project_service.list_tasks(backend, project_id))


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def post_task(project_id: str, form: TaskForm, backend: BackendClient = Depends(get_backend)):
    return TaskResponse(task=await project_service.create_task(backend, project_id, form))


@router.patch("/{project_id}/tasks/{task_id}", response_model=TaskResponse)
async def patch_task(
    project_id: str,
    task_id: str,
    form: TaskForm,
    backend: BackendClient = Depends(get_backend),
):
    return TaskResponse(task=await project_service.update_task(backend, project_id, task_id, form))


@router.delete("/{project_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_task(project_id: str, task_id: str, backend: BackendClient = Depends(get_backend)):
    await project_service.delete_task(backend, project_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# TIMELINE
# =============================================================================


@router.post(
    "/{project_id}/timeline",
    response_model=TimelineItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_timeline_item(
    project_id: str,
    form: TimelineItemForm,
    backend: BackendClient = Depends(get_backend),
):
    item = await project_service.create_timeline_item(backend, project_id, form)
    return TimelineItemResponse(item=item)


@router.patch("/{project_id}/timeline/{item_id}", response_model=TimelineItemResponse)
async def patch_timeline_item(
    project_id: str,
    item_id: str,
    form: TimelineItemForm,
    backend: BackendClient = Depends(get_backend),
):
    item = await project_service.update_timeline_item(backend, project_id, item_id, form)
    return TimelineItemResponse(item=item)


@router.delete("/{project_id}/timeline/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_timeline_item(project_id: str, item_id: str, backend: BackendClient = Depends(get_backend)):
    await project_service.delete_timeline_item(backend, project_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/dependencies", response_model=DependencyListResponse)
async def get_dependencies(project_id: str, backend: BackendClient = Depends(get_backend)):
    return DependencyListResponse(dependencies=await project_service.list_dependencies(backend, project_id))


@router.post(
    "/{project_id}/dependencies",
    response_model=DependencyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_dependency(
    project_id: str,
    form: DependencyForm,
    backend: BackendClient = Depends(get_backend),
):
    dependency = await project_service.create_dependency(
        backend,
        project_id,
        form.from_item_id,
        form.to_item_id,
        kind=form.kind,
        note=form.note,
    )
    return DependencyResponse(dependency=dependency)
