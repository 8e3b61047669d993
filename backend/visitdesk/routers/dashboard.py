"""Dashboard routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from visitdesk.database import get_db
from visitdesk.dependencies import get_current_actor
from visitdesk.schemas.actor import Actor
from visitdesk.schemas.dashboard import DashboardStats
from visitdesk.services import dashboard_service

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Visitor counts; pending-request counts are zero for non-approvers."""
    return dashboard_service.get_dashboard_stats(db, actor.role)
