"""Pydantic schemas for Users."""
from datetime import datetime
from pydantic import BaseModel

from visitdesk.models.user import Role


class UserCreate(BaseModel):
    name: str
    email: str
    role: str = "Receptionist"


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
