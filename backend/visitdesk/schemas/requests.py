"""Pydantic schemas for edit/deletion requests, their results and the audit trail."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from visitdesk.config import settings
from visitdesk.models.enums import AuditAction, RequestStatus


class EditRequestCreate(BaseModel):
    visitor_id: int = Field(..., ge=1)
    reason: str
    edit_data: dict[str, Any]

    @field_validator("reason")
    @classmethod
    def _reason_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < settings.MIN_REASON_LENGTH:
            raise ValueError(f"Reason must be at least {settings.MIN_REASON_LENGTH} characters")
        return value


class DeletionRequestCreate(BaseModel):
    visitor_id: int = Field(..., ge=1)
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < settings.MIN_REASON_LENGTH:
            raise ValueError(f"Reason must be at least {settings.MIN_REASON_LENGTH} characters")
        return value


class ApprovePayload(BaseModel):
    action_type: str  # edit, delete


class RejectPayload(BaseModel):
    action_type: str  # edit, delete
    rejection_reason: str = ""

    @field_validator("rejection_reason")
    @classmethod
    def _rejection_reason_length(cls, value: str) -> str:
        value = value.strip()
        if value and len(value) < settings.MIN_REJECTION_REASON_LENGTH:
            raise ValueError(
                f"Rejection reason must be at least {settings.MIN_REJECTION_REASON_LENGTH} characters if provided"
            )
        return value


class RequestReceipt(BaseModel):
    """Result of submitting an edit or deletion request."""

    id: int
    visitor_id: int
    kind: str
    status: RequestStatus
    created: bool
    message: str


class ActionResult(BaseModel):
    success: bool
    message: str


class EditRequestOut(BaseModel):
    id: int
    visitor_id: int
    reason: str
    original_data: Optional[dict[str, Any]] = None
    proposed_data: dict[str, Any]
    status: RequestStatus
    requested_by: Optional[int] = None
    requested_by_name: str
    requested_by_role: str
    processed_by: Optional[int] = None
    processed_by_name: Optional[str] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeletionRequestOut(BaseModel):
    id: int
    visitor_id: int
    requested_by: Optional[int] = None
    reason: str
    status: RequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    visitor_name: Optional[str] = None
    visitor_phone: Optional[str] = None
    visitor_email: Optional[str] = None
    visitor_institution: Optional[str] = None
    requested_by_name: Optional[str] = None
    requested_by_email: Optional[str] = None
    approved_by_name: Optional[str] = None

    model_config = {"from_attributes": True}


class DeletionRequestStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


class AuditLogOut(BaseModel):
    id: int
    deletion_request_id: int
    visitor_id: Optional[int] = None
    action: AuditAction
    performed_by: Optional[int] = None
    action_details: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
