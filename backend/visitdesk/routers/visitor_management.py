"""Visitor management routes: role-scoped listings and change-request submission."""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import get_current_actor
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.dashboard import VisitorManagementOut
from visitdesk.schemas.requests import DeletionRequestCreate, EditRequestCreate, RequestReceipt
from visitdesk.schemas.visitor import VisitorFilters
from visitdesk.services import dashboard_service, visitor_view_service, workflow_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=VisitorManagementOut)
def list_visitors(
    view_type: str = Query("active", alias="viewType"),
    search: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Visitors the caller's role may see for ``viewType``, plus dashboard counts."""
    filters = VisitorFilters(
        search=search,
        location=location,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    visitors = visitor_view_service.find_by_role_and_view(db, filters, actor.role, view_type)
    stats = dashboard_service.get_dashboard_stats(db, actor.role)
    return VisitorManagementOut(
        visitors=visitors,
        stats=stats,
        view_type=view_type,
        user_role=actor.role,
        total=len(visitors),
    )


@router.post("/edit-request", response_model=RequestReceipt, status_code=status.HTTP_201_CREATED)
def create_edit_request(
    payload: EditRequestCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Submit an edit for approval. Resubmitting updates the pending request."""
    return workflow_service.create_edit_request(
        db,
        visitor_id=payload.visitor_id,
        proposed_fields=payload.edit_data,
        reason=payload.reason,
        requester=actor,
    )


@router.post("/deletion-request", response_model=RequestReceipt, status_code=status.HTTP_201_CREATED)
def create_deletion_request(
    payload: DeletionRequestCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Submit a deletion for approval. Resubmitting updates the pending request."""
    return workflow_service.create_deletion_request(
        db,
        visitor_id=payload.visitor_id,
        reason=payload.reason,
        requester=actor,
    )
