"""Authenticated actor descriptor supplied by the transport for every call."""
from typing import Optional
from pydantic import BaseModel


class Actor(BaseModel):
    id: int
    role: str
    display_name: Optional[str] = None
