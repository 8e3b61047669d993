"""Deletion request ledger routes (approvers only)."""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import require_approver
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.requests import AuditLogOut, DeletionRequestOut, DeletionRequestStats
from visitdesk.services import request_query_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[DeletionRequestOut])
def list_deletion_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """List deletion requests, optionally filtered by status and creation date."""
    return request_query_service.list_deletion_requests(
        db, status=status_filter, start_date=start_date, end_date=end_date, limit=limit,
    )


@router.get("/stats", response_model=DeletionRequestStats)
def deletion_request_stats(approver: Actor = Depends(require_approver), db: Session = Depends(get_db)):
    """Counts of deletion requests by status."""
    return request_query_service.get_deletion_request_stats(db)


@router.get("/{request_id}", response_model=DeletionRequestOut)
def get_deletion_request(
    request_id: int,
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """Fetch one deletion request with visitor and requester details."""
    return request_query_service.get_deletion_request(db, request_id)


@router.get("/{request_id}/audit-log", response_model=list[AuditLogOut])
def get_audit_log(
    request_id: int,
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """Audit trail for a deletion request, oldest first."""
    return request_query_service.list_audit_entries(db, request_id)
