"""ORM models. Importing this package registers every table with Base.metadata."""
from visitdesk.models.user import User, Role
from visitdesk.models.visitor import Visitor
from visitdesk.models.edit_request import EditRequest
from visitdesk.models.deletion_request import DeletionRequest
from visitdesk.models.deletion_audit_log import DeletionAuditLog

__all__ = [
    "User",
    "Role",
    "Visitor",
    "EditRequest",
    "DeletionRequest",
    "DeletionAuditLog",
]
