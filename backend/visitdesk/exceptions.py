"""Typed failures raised by the service layer.

Services never build HTTP responses; the transport maps each class to a
status code (see ``main.add_exception_handlers``).
"""
from fastapi import status


class WorkflowError(Exception):
    """Base exception for service layer errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WorkflowError):
    """Malformed or missing input; the caller must correct it."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(WorkflowError):
    """A referenced visitor or request does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(WorkflowError):
    """The operation would break a workflow invariant."""

    status_code = status.HTTP_409_CONFLICT


class PermissionDeniedError(WorkflowError):
    """The actor's role is not entitled to the view or action."""

    status_code = status.HTTP_403_FORBIDDEN


class StorageError(WorkflowError):
    """The database failed to apply a transaction. Detail is logged, not returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
