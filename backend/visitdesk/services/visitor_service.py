"""Record store operations outside the approval workflow: check-in, check-out,
direct operator updates and lookups.

Soft-deleted visitors are read-only here; they can only be reached through
the deleted/all approver views.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from visitdesk.database import atomic
from visitdesk.exceptions import ConflictError, NotFoundError, ValidationError
from visitdesk.models.visitor import EDITABLE_FIELDS, Visitor
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.visitor import VisitorCreate, VisitorUpdate
from visitdesk.services.identity_service import resolve_actor

logger = logging.getLogger(__name__)


def validate_visitor_fields(fields: dict[str, Any], schema: type[BaseModel] = VisitorUpdate) -> dict[str, Any]:
    """Check keys against the allow-list and values against ``schema``.

    Returns only the keys present in ``fields``, with their validated values.
    """
    unknown = sorted(key for key in fields if key not in EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")
    try:
        parsed = schema.model_validate(fields)
    except SchemaValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ValidationError(f"Invalid visitor fields: {problems}") from None
    return parsed.model_dump(exclude_unset=True)


def get_visitor(db: Session, visitor_id: int, include_deleted: bool = False) -> Visitor:
    visitor = db.query(Visitor).filter(Visitor.id == visitor_id).first()
    if visitor is None or (visitor.deleted_at is not None and not include_deleted):
        raise NotFoundError("Visitor not found")
    return visitor


def check_in_visitor(
    db: Session,
    fields: dict[str, Any],
    operator: Actor,
    check_in_time: Optional[datetime] = None,
) -> Visitor:
    """Create a visitor record stamped with the checking-in operator."""
    fields = validate_visitor_fields(fields, VisitorCreate)
    if not fields["full_name"].strip():
        raise ValidationError("full_name is required")

    with atomic(db):
        operator = resolve_actor(db, operator)
        visitor = Visitor(
            **fields,
            check_in_time=check_in_time or datetime.now(timezone.utc),
            input_by_user_id=operator.id,
            input_by_name=operator.display_name,
        )
        db.add(visitor)
        db.flush()

    db.refresh(visitor)
    logger.info("Checked in visitor %s (%s) by user %s", visitor.id, visitor.full_name, operator.id)
    return visitor


def update_visitor(db: Session, visitor_id: int, updates: dict[str, Any], operator: Actor) -> Visitor:
    """Direct operator update of editable fields (no approval step)."""
    updates = validate_visitor_fields(updates)
    if not updates:
        raise ValidationError("No valid fields to edit")
    if "full_name" in updates and not (updates["full_name"] or "").strip():
        raise ValidationError("full_name cannot be empty")

    with atomic(db):
        visitor = db.query(Visitor).filter(Visitor.id == visitor_id).with_for_update().first()
        if visitor is None:
            raise NotFoundError("Visitor not found")
        if visitor.deleted_at is not None:
            raise ConflictError("Visitor is already deleted")
        for field, value in updates.items():
            setattr(visitor, field, value)
        visitor.updated_at = datetime.now(timezone.utc)

    db.refresh(visitor)
    logger.info("Updated visitor %s fields %s by user %s", visitor_id, sorted(updates), operator.id)
    return visitor


def check_out_visitor(db: Session, visitor_id: int, operator: Actor) -> Visitor:
    """Stamp the check-out time and operator; each visit checks out once."""
    with atomic(db):
        operator = resolve_actor(db, operator)
        visitor = db.query(Visitor).filter(Visitor.id == visitor_id).with_for_update().first()
        if visitor is None:
            raise NotFoundError("Visitor not found")
        if visitor.deleted_at is not None:
            raise ConflictError("Visitor is already deleted")
        if visitor.check_out_time is not None:
            raise ConflictError("Visitor has already checked out")
        visitor.check_out_time = datetime.now(timezone.utc)
        visitor.checkout_by_user_id = operator.id
        visitor.checkout_by_name = operator.display_name

    db.refresh(visitor)
    logger.info("Checked out visitor %s by user %s", visitor_id, operator.id)
    return visitor
