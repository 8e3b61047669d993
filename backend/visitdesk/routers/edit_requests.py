"""Edit request ledger routes (approvers only)."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import require_approver
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.requests import EditRequestOut
from visitdesk.services import request_query_service

router = APIRouter()


@router.get("/", response_model=list[EditRequestOut])
def list_edit_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    visitor_id: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """List edit requests, optionally filtered by status or visitor."""
    return request_query_service.list_edit_requests(db, status=status_filter, visitor_id=visitor_id, limit=limit)


@router.get("/{request_id}", response_model=EditRequestOut)
def get_edit_request(
    request_id: int,
    approver: Actor = Depends(require_approver),
    db: Session = Depends(get_db),
):
    """Fetch one edit request with its original and proposed data."""
    return request_query_service.get_edit_request(db, request_id)
