"""Read-only queries over the request ledger and the deletion audit trail."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, aliased

from visitdesk.exceptions import NotFoundError, ValidationError
from visitdesk.models.deletion_audit_log import DeletionAuditLog
from visitdesk.models.deletion_request import DeletionRequest
from visitdesk.models.edit_request import EditRequest
from visitdesk.models.enums import RequestStatus
from visitdesk.models.user import User
from visitdesk.models.visitor import Visitor
from visitdesk.schemas.requests import DeletionRequestOut, DeletionRequestStats

logger = logging.getLogger(__name__)


def _parse_status(status: Optional[str]) -> Optional[RequestStatus]:
    if status is None:
        return None
    try:
        return RequestStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown request status '{status}'") from None


def _deletion_query(db: Session):
    requester = aliased(User)
    approver = aliased(User)
    return (
        db.query(
            DeletionRequest,
            Visitor.full_name,
            Visitor.phone_number,
            Visitor.email,
            Visitor.institution,
            requester.name,
            requester.email,
            approver.name,
        )
        .outerjoin(Visitor, Visitor.id == DeletionRequest.visitor_id)
        .outerjoin(requester, requester.id == DeletionRequest.requested_by)
        .outerjoin(approver, approver.id == DeletionRequest.approved_by)
    )


def _to_deletion_out(row) -> DeletionRequestOut:
    request, visitor_name, phone, email, institution, requested_by_name, requested_by_email, approved_by_name = row
    out = DeletionRequestOut.model_validate(request)
    return out.model_copy(update={
        "visitor_name": visitor_name,
        "visitor_phone": phone,
        "visitor_email": email,
        "visitor_institution": institution,
        "requested_by_name": requested_by_name,
        "requested_by_email": requested_by_email,
        "approved_by_name": approved_by_name,
    })


def list_deletion_requests(
    db: Session,
    status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[DeletionRequestOut]:
    """Deletion requests with visitor and requester details, newest first."""
    query = _deletion_query(db)
    parsed = _parse_status(status)
    if parsed is not None:
        query = query.filter(DeletionRequest.status == parsed)
    if start_date:
        query = query.filter(DeletionRequest.created_at >= start_date)
    if end_date:
        query = query.filter(DeletionRequest.created_at <= end_date)
    query = query.order_by(DeletionRequest.created_at.desc(), DeletionRequest.id.desc())
    if limit:
        query = query.limit(limit)
    return [_to_deletion_out(row) for row in query.all()]


def get_deletion_request(db: Session, request_id: int) -> DeletionRequestOut:
    row = _deletion_query(db).filter(DeletionRequest.id == request_id).first()
    if row is None:
        raise NotFoundError("Deletion request not found")
    return _to_deletion_out(row)


def list_deletion_requests_for_visitor(db: Session, visitor_id: int) -> list[DeletionRequestOut]:
    query = (
        _deletion_query(db)
        .filter(DeletionRequest.visitor_id == visitor_id)
        .order_by(DeletionRequest.created_at.desc(), DeletionRequest.id.desc())
    )
    return [_to_deletion_out(row) for row in query.all()]


def get_deletion_request_stats(db: Session) -> DeletionRequestStats:
    def _count(status: RequestStatus):
        return func.coalesce(func.sum(case((DeletionRequest.status == status, 1), else_=0)), 0)

    total, pending, approved, rejected = db.query(
        func.count(DeletionRequest.id),
        _count(RequestStatus.pending),
        _count(RequestStatus.approved),
        _count(RequestStatus.rejected),
    ).one()
    return DeletionRequestStats(
        total=total or 0,
        pending=pending or 0,
        approved=approved or 0,
        rejected=rejected or 0,
    )


def list_audit_entries(db: Session, deletion_request_id: int) -> list[DeletionAuditLog]:
    """Audit trail for one deletion request, oldest first."""
    if db.get(DeletionRequest, deletion_request_id) is None:
        raise NotFoundError("Deletion request not found")
    return (
        db.query(DeletionAuditLog)
        .filter(DeletionAuditLog.deletion_request_id == deletion_request_id)
        .order_by(DeletionAuditLog.id)
        .all()
    )


def list_edit_requests(
    db: Session,
    status: Optional[str] = None,
    visitor_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[EditRequest]:
    query = db.query(EditRequest)
    parsed = _parse_status(status)
    if parsed is not None:
        query = query.filter(EditRequest.status == parsed)
    if visitor_id is not None:
        query = query.filter(EditRequest.visitor_id == visitor_id)
    query = query.order_by(EditRequest.created_at.desc(), EditRequest.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_edit_request(db: Session, request_id: int) -> EditRequest:
    request = db.get(EditRequest, request_id)
    if request is None:
        raise NotFoundError("Edit request not found")
    return request
