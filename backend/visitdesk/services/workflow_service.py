"""Visitor change-approval workflow: the only writer of request status fields.

Responsibilities:
- Capture edit and deletion intents as pending requests, at most one pending
  request per kind per visitor (resubmission updates the pending row in place)
- Refuse any new request against a soft-deleted visitor
- Approval applies the change to the visitor; rejection never touches it
- Every deletion-request transition appends a DeletionAuditLog entry
- Each operation is one transaction: rollback and re-raise on any failure
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from visitdesk.database import atomic
from visitdesk.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from visitdesk.models.deletion_audit_log import DeletionAuditLog
from visitdesk.models.deletion_request import DeletionRequest
from visitdesk.models.edit_request import EditRequest
from visitdesk.models.enums import AuditAction, RequestKind, RequestStatus
from visitdesk.models.user import is_approver
from visitdesk.models.visitor import EDITABLE_FIELDS, Visitor
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.requests import ActionResult, RequestReceipt
from visitdesk.services.identity_service import resolve_actor
from visitdesk.services.visitor_service import validate_visitor_fields

logger = logging.getLogger(__name__)

_KIND_LABELS = {
    RequestKind.edit: "edit",
    RequestKind.deletion: "deletion",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _visitor_snapshot(visitor: Visitor) -> dict[str, Any]:
    """Serialize the visitor's business fields to a JSON-safe dict."""
    snapshot: dict[str, Any] = {"id": visitor.id}
    for field in EDITABLE_FIELDS:
        snapshot[field] = getattr(visitor, field)
    snapshot["check_in_time"] = _isoformat(visitor.check_in_time)
    snapshot["check_out_time"] = _isoformat(visitor.check_out_time)
    return snapshot


def clean_proposed_fields(proposed_fields: Any) -> dict[str, Any]:
    """Validate a proposed-change mapping: allow-listed keys, well-typed values."""
    if not isinstance(proposed_fields, dict) or not proposed_fields:
        raise ValidationError("No valid fields to edit")

    proposed = validate_visitor_fields(proposed_fields)

    if "full_name" in proposed:
        full_name = proposed["full_name"]
        if full_name is None or not full_name.strip():
            raise ValidationError("full_name cannot be empty")

    return proposed


def _require_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required")
    return reason


def _require_approver(actor: Actor, action: str) -> None:
    if not is_approver(actor.role):
        raise PermissionDeniedError(f"Role '{actor.role}' is not allowed to {action}")


def _parse_kind(kind: Any) -> RequestKind:
    if kind == "delete":
        return RequestKind.deletion
    try:
        return RequestKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown request type '{kind}'") from None


def _lock_visitor(db: Session, visitor_id: int) -> Optional[Visitor]:
    """Load a visitor row, locked for the rest of the transaction where supported."""
    return db.query(Visitor).filter(Visitor.id == visitor_id).with_for_update().first()


def _lock_pending(db: Session, model, visitor_id: int):
    return (
        db.query(model)
        .filter(model.visitor_id == visitor_id, model.status == RequestStatus.pending)
        .with_for_update()
        .first()
    )


def _load_request(db: Session, model, request_id: int, label: str):
    request = db.query(model).filter(model.id == request_id).with_for_update().first()
    if request is None:
        raise NotFoundError(f"{label} not found")
    return request


def _ensure_pending(request, label: str) -> None:
    """Only pending requests may transition; terminal states are never reopened."""
    status = RequestStatus(request.status)
    if status is RequestStatus.pending:
        return
    if status is RequestStatus.approved:
        raise ConflictError(f"{label} has already been approved")
    if status is RequestStatus.rejected:
        raise ConflictError(f"{label} has already been rejected")
    raise ConflictError(f"{label} is in an unexpected state '{status.value}'")


def _insert_pending(db: Session, row, kind: RequestKind) -> None:
    """Insert a new pending row; a lost race on the pending index becomes a conflict."""
    db.add(row)
    try:
        db.flush()
    except IntegrityError as exc:
        if "unique" not in str(exc.orig).lower():
            raise
        raise ConflictError(
            f"There is already a pending {_KIND_LABELS[kind]} request for this visitor"
        ) from exc


def _append_audit(
    db: Session,
    request: DeletionRequest,
    action: AuditAction,
    actor: Actor,
    details: dict[str, Any],
) -> DeletionAuditLog:
    """Append one audit entry. Part of the enclosing transaction."""
    entry = DeletionAuditLog(
        deletion_request_id=request.id,
        visitor_id=request.visitor_id,
        action=action,
        performed_by=actor.id,
        action_details=details,
    )
    db.add(entry)
    db.flush()
    return entry


def _check_target(visitor: Optional[Visitor]) -> Visitor:
    if visitor is None:
        raise NotFoundError("Visitor not found")
    if visitor.deleted_at is not None:
        raise ConflictError("Visitor is already deleted")
    return visitor


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------
def create_edit_request(
    db: Session,
    visitor_id: int,
    proposed_fields: dict[str, Any],
    reason: str,
    requester: Actor,
) -> RequestReceipt:
    """Submit (or resubmit) a field edit for approval."""
    proposed = clean_proposed_fields(proposed_fields)
    reason = _require_reason(reason)

    with atomic(db):
        requester = resolve_actor(db, requester)
        visitor = _check_target(_lock_visitor(db, visitor_id))
        original = _visitor_snapshot(visitor)

        existing = _lock_pending(db, EditRequest, visitor_id)
        if existing is not None:
            existing.reason = reason
            existing.original_data = original
            existing.proposed_data = proposed
            existing.requested_by = requester.id
            existing.requested_by_name = requester.display_name
            existing.requested_by_role = requester.role
            existing.updated_at = _utcnow()
            request, created = existing, False
        else:
            request = EditRequest(
                visitor_id=visitor_id,
                reason=reason,
                original_data=original,
                proposed_data=proposed,
                status=RequestStatus.pending,
                requested_by=requester.id,
                requested_by_name=requester.display_name,
                requested_by_role=requester.role,
            )
            _insert_pending(db, request, RequestKind.edit)
            created = True

    if created:
        logger.info("Edit request %s created for visitor %s by user %s", request.id, visitor_id, requester.id)
        message = "Edit request submitted successfully. Waiting for admin approval."
    else:
        logger.info("Edit request %s updated for visitor %s by user %s", request.id, visitor_id, requester.id)
        message = "Edit request updated successfully"
    return RequestReceipt(
        id=request.id,
        visitor_id=visitor_id,
        kind=RequestKind.edit.value,
        status=RequestStatus.pending.value,
        created=created,
        message=message,
    )


def create_deletion_request(
    db: Session,
    visitor_id: int,
    reason: str,
    requester: Actor,
) -> RequestReceipt:
    """Submit (or resubmit) a soft-delete request for approval."""
    reason = _require_reason(reason)

    with atomic(db):
        requester = resolve_actor(db, requester)
        visitor = _check_target(_lock_visitor(db, visitor_id))

        existing = _lock_pending(db, DeletionRequest, visitor_id)
        if existing is not None:
            existing.reason = reason
            existing.requested_by = requester.id
            existing.updated_at = _utcnow()
            request, created = existing, False
        else:
            request = DeletionRequest(
                visitor_id=visitor_id,
                requested_by=requester.id,
                reason=reason,
                status=RequestStatus.pending,
            )
            _insert_pending(db, request, RequestKind.deletion)
            _append_audit(db, request, AuditAction.created, requester, {
                "visitor_id": visitor_id,
                "visitor_name": visitor.full_name,
                "reason": reason,
            })
            created = True

    if created:
        logger.info("Deletion request %s created for visitor %s by user %s", request.id, visitor_id, requester.id)
        message = "Delete request submitted successfully. Waiting for admin approval."
    else:
        logger.info("Deletion request %s updated for visitor %s by user %s", request.id, visitor_id, requester.id)
        message = "Deletion request updated successfully"
    return RequestReceipt(
        id=request.id,
        visitor_id=visitor_id,
        kind=RequestKind.deletion.value,
        status=RequestStatus.pending.value,
        created=created,
        message=message,
    )


# ---------------------------------------------------------------------------
# Approval / rejection
# ---------------------------------------------------------------------------
def approve_edit_request(db: Session, request_id: int, approver: Actor) -> ActionResult:
    """Apply a pending edit request's proposed fields to its visitor."""
    _require_approver(approver, "approve requests")

    with atomic(db):
        approver = resolve_actor(db, approver)
        request = _load_request(db, EditRequest, request_id, "Edit request")
        _ensure_pending(request, "Edit request")

        visitor = _lock_visitor(db, request.visitor_id)
        if visitor is None:
            raise NotFoundError("Visitor not found")
        if visitor.deleted_at is not None:
            raise ConflictError("Visitor has been deleted; reject this edit request instead")

        now = _utcnow()
        for field, value in (request.proposed_data or {}).items():
            if field == "id" or field not in EDITABLE_FIELDS:
                logger.warning("Skipping non-editable field '%s' in edit request %s", field, request_id)
                continue
            setattr(visitor, field, value)
        visitor.updated_at = now

        request.status = RequestStatus.approved
        request.processed_by = approver.id
        request.processed_by_name = approver.display_name
        request.processed_at = now

    logger.info("Edit request %s approved by user %s", request_id, approver.id)
    return ActionResult(success=True, message="Edit request approved successfully")


def approve_deletion_request(db: Session, request_id: int, approver: Actor) -> ActionResult:
    """Soft-delete the visitor targeted by a pending deletion request."""
    _require_approver(approver, "approve requests")

    with atomic(db):
        approver = resolve_actor(db, approver)
        request = _load_request(db, DeletionRequest, request_id, "Deletion request")
        _ensure_pending(request, "Deletion request")

        visitor = _lock_visitor(db, request.visitor_id)
        if visitor is None:
            raise NotFoundError("Visitor not found")

        now = _utcnow()
        visitor.deleted_at = now
        visitor.deleted_by = approver.id

        request.status = RequestStatus.approved
        request.approved_by = approver.id
        request.approved_at = now

        _append_audit(db, request, AuditAction.approved, approver, {
            "visitor_id": visitor.id,
            "visitor_name": visitor.full_name,
        })

    logger.info("Deletion request %s approved by user %s; visitor %s deleted",
                request_id, approver.id, request.visitor_id)
    return ActionResult(success=True, message="Deletion request approved and visitor deleted successfully")


def approve_request(db: Session, request_id: int, kind: Any, approver: Actor) -> ActionResult:
    """Dispatch an approval to the ledger named by ``kind``."""
    if _parse_kind(kind) is RequestKind.edit:
        return approve_edit_request(db, request_id, approver)
    return approve_deletion_request(db, request_id, approver)


def reject_request(
    db: Session,
    request_id: int,
    kind: Any,
    rejecter: Actor,
    rejection_reason: str = "",
) -> ActionResult:
    """Reject a pending edit or deletion request. The visitor is left untouched."""
    _require_approver(rejecter, "reject requests")
    request_kind = _parse_kind(kind)
    rejection_reason = (rejection_reason or "").strip()

    with atomic(db):
        rejecter = resolve_actor(db, rejecter)
        now = _utcnow()

        if request_kind is RequestKind.edit:
            request = _load_request(db, EditRequest, request_id, "Edit request")
            _ensure_pending(request, "Edit request")
            request.status = RequestStatus.rejected
            request.processed_by = rejecter.id
            request.processed_by_name = rejecter.display_name
            request.processed_at = now
            request.notes = rejection_reason
        else:
            request = _load_request(db, DeletionRequest, request_id, "Deletion request")
            _ensure_pending(request, "Deletion request")
            request.status = RequestStatus.rejected
            request.rejected_by = rejecter.id
            request.rejected_at = now
            request.rejection_reason = rejection_reason
            _append_audit(db, request, AuditAction.rejected, rejecter, {
                "visitor_id": request.visitor_id,
                "rejection_reason": rejection_reason,
                "rejected_by": rejecter.display_name,
                "rejected_by_role": rejecter.role,
            })

    logger.info("%s request %s rejected by user %s",
                _KIND_LABELS[request_kind].capitalize(), request_id, rejecter.id)
    return ActionResult(success=True, message="Request rejected successfully")
