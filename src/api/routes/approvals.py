"""Approval queue endpoints."""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_backend
from api.models.responses import ApprovalListResponse, ApprovalResponse
from core.backend_client import BackendClient
from models.forms import ApprovalDecisionForm
from services.projects import decide_approval, list_approvals, pending_approval_count

router = APIRouter(prefix="/v1/approvals", tags=["approvals"])


@router.get("", response_model=ApprovalListResponse)
async def get_approvals(
    project_id: str | None = Query(None, alias="projectId"),
    status_filter: str | None = Query("pending", alias="status"),
    backend: BackendClient = Depends(get_backend),
):
    approvals = await list_approvals(backend, project_id=project_id, status=status_filter)
    return ApprovalListResponse(approvals=approvals, pending=pending_approval_count(approvals))


@router.post("/{approval_id}/decision", response_model=ApprovalResponse)
async def post_decision(
    approval_id: str,
    form: ApprovalDecisionForm,
    backend: BackendClient = Depends(get_backend),
):
    """Approve or decline a pending approval."""
    return ApprovalResponse(approval=await decide_approval(backend, approval_id, form))
