"""Enumerations shared by the request ledger, audit log and view builder."""
import enum


class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class RequestKind(str, enum.Enum):
    edit = "edit"
    deletion = "deletion"


class AuditAction(str, enum.Enum):
    created = "created"
    approved = "approved"
    rejected = "rejected"


class ComputedStatus(str, enum.Enum):
    """Derived, non-stored classification of a visitor row."""

    active = "active"
    pending_edit = "pending_edit"
    pending_delete = "pending_delete"
    deleted = "deleted"


class ViewType(str, enum.Enum):
    active = "active"
    pending_requests = "pending_requests"
    pending_deletion = "pending_deletion"
    pending_edit = "pending_edit"
    deleted = "deleted"
    all = "all"
