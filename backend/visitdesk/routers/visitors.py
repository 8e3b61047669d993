"""Visitor API routes: check-in, lookup, direct update and check-out."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import get_current_actor
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.requests import DeletionRequestOut, EditRequestOut
from visitdesk.schemas.visitor import VisitorCreate, VisitorOut, VisitorUpdate
from visitdesk.services import request_query_service, visitor_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=VisitorOut, status_code=status.HTTP_201_CREATED)
def check_in(
    payload: VisitorCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Check a visitor in."""
    fields = payload.model_dump(exclude_unset=True, exclude={"check_in_time"})
    return visitor_service.check_in_visitor(db, fields, actor, check_in_time=payload.check_in_time)


@router.get("/{visitor_id}", response_model=VisitorOut)
def get_visitor(visitor_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    """Fetch an active visitor by ID."""
    return visitor_service.get_visitor(db, visitor_id)


@router.patch("/{visitor_id}", response_model=VisitorOut)
def update_visitor(
    visitor_id: int,
    payload: VisitorUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Direct update of editable fields, outside the approval workflow."""
    updates = payload.model_dump(exclude_unset=True)
    return visitor_service.update_visitor(db, visitor_id, updates, actor)


@router.post("/{visitor_id}/checkout", response_model=VisitorOut)
def check_out(visitor_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Check a visitor out."""
    return visitor_service.check_out_visitor(db, visitor_id, actor)


@router.get("/{visitor_id}/edit-requests", response_model=list[EditRequestOut])
def list_visitor_edit_requests(
    visitor_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Edit request history for one visitor."""
    visitor_service.get_visitor(db, visitor_id, include_deleted=True)
    return request_query_service.list_edit_requests(db, visitor_id=visitor_id)


@router.get("/{visitor_id}/deletion-requests", response_model=list[DeletionRequestOut])
def list_visitor_deletion_requests(
    visitor_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Deletion request history for one visitor."""
    visitor_service.get_visitor(db, visitor_id, include_deleted=True)
    return request_query_service.list_deletion_requests_for_visitor(db, visitor_id)
