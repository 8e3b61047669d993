"""Pydantic schemas for dashboard and visitor-management listings."""
from pydantic import BaseModel

from visitdesk.schemas.visitor import AnnotatedVisitorOut


class DashboardStats(BaseModel):
    total_visitors: int = 0
    active_visitors: int = 0
    deleted_visitors: int = 0
    pending_edit_requests: int = 0
    pending_deletion_requests: int = 0
    today_visitors: int = 0
    weekly_growth: int = 0


class VisitorManagementOut(BaseModel):
    visitors: list[AnnotatedVisitorOut]
    stats: DashboardStats
    view_type: str
    user_role: str
    total: int
