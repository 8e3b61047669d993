"""Pydantic schemas for Visitors and role-scoped visitor listings."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class VisitorCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    institution: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = None
    person_to_meet: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    id_number: Optional[str] = Field(None, max_length=50)
    id_type: Optional[str] = Field(None, max_length=50)
    document_type: Optional[str] = Field(None, max_length=50)
    check_in_time: Optional[datetime] = None


class VisitorUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    institution: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = None
    person_to_meet: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    id_number: Optional[str] = Field(None, max_length=50)
    id_type: Optional[str] = Field(None, max_length=50)
    document_type: Optional[str] = Field(None, max_length=50)


class VisitorOut(BaseModel):
    id: int
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    institution: Optional[str] = None
    purpose: Optional[str] = None
    person_to_meet: Optional[str] = None
    location: Optional[str] = None
    id_number: Optional[str] = None
    id_type: Optional[str] = None
    document_type: Optional[str] = None
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    input_by_user_id: Optional[int] = None
    input_by_name: Optional[str] = None
    checkout_by_user_id: Optional[int] = None
    checkout_by_name: Optional[str] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None

    model_config = {"from_attributes": True}


class PendingRequestInfo(BaseModel):
    """The pending request currently attached to a visitor row."""

    id: int
    reason: str
    requested_at: Optional[datetime] = None
    requested_by_name: Optional[str] = None
    requested_by_role: Optional[str] = None


class AnnotatedVisitorOut(VisitorOut):
    computed_status: str
    deleted_by_name: Optional[str] = None
    pending_deletion: Optional[PendingRequestInfo] = None
    pending_edit: Optional[PendingRequestInfo] = None


class VisitorFilters(BaseModel):
    search: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: Optional[int] = Field(None, ge=1, le=1000)
