"""Approver routes: approve or reject a pending edit or deletion request."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import require_approver
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.requests import ActionResult, ApprovePayload, RejectPayload
from visitdesk.services import workflow_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.patch("/{request_id}/approve", response_model=ActionResult)
def approve_action(
    request_id: int,
    payload: ApprovePayload,
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """Approve a pending request: apply the edit, or soft-delete the visitor."""
    return workflow_service.approve_request(db, request_id, payload.action_type, approver)


@router.patch("/{request_id}/reject", response_model=ActionResult)
def reject_action(
    request_id: int,
    payload: RejectPayload,
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """Reject a pending request. The visitor record is left unchanged."""
    return workflow_service.reject_request(
        db, request_id, payload.action_type, approver, payload.rejection_reason,
    )
