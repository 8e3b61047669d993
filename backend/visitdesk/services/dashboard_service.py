"""Summary counts for the dashboard.

Day and week boundaries are computed in ``settings.APP_TIMEZONE`` and
converted to UTC before querying. Pending-request counts are only revealed to
approver roles.
"""
import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from visitdesk.config import settings
from visitdesk.models.deletion_request import DeletionRequest
from visitdesk.models.edit_request import EditRequest
from visitdesk.models.enums import RequestStatus
from visitdesk.models.user import is_approver
from visitdesk.models.visitor import Visitor
from visitdesk.schemas.dashboard import DashboardStats

logger = logging.getLogger(__name__)


def weekly_growth(this_week: int, last_week: int) -> int:
    """Percentage change week over week, rounded half up; 0 when last week was empty."""
    if last_week <= 0:
        return 0
    return int(math.floor((this_week - last_week) / last_week * 100 + 0.5))


def _local_now(now: Optional[datetime]) -> datetime:
    tz = pytz.timezone(settings.APP_TIMEZONE)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz)


def _start_of_day_utc(day: date, tz) -> datetime:
    return tz.localize(datetime.combine(day, time.min)).astimezone(timezone.utc)


def _count_visitors(db: Session, *criteria) -> int:
    return db.query(func.count(Visitor.id)).filter(*criteria).scalar() or 0


def _count_pending(db: Session, model) -> int:
    return db.query(func.count(model.id)).filter(model.status == RequestStatus.pending).scalar() or 0


def get_dashboard_stats(db: Session, role: Any, now: Optional[datetime] = None) -> DashboardStats:
    """Visitor counts for ``role``; operators get zeroed pending-request counts."""
    local_now = _local_now(now)
    tz = local_now.tzinfo
    today = local_now.date()

    today_start = _start_of_day_utc(today, tz)
    tomorrow_start = _start_of_day_utc(today + timedelta(days=1), tz)
    week_start_day = today - timedelta(days=today.weekday())
    this_week_start = _start_of_day_utc(week_start_day, tz)
    next_week_start = _start_of_day_utc(week_start_day + timedelta(days=7), tz)
    last_week_start = _start_of_day_utc(week_start_day - timedelta(days=7), tz)

    stats = DashboardStats(
        total_visitors=_count_visitors(db),
        active_visitors=_count_visitors(db, Visitor.deleted_at.is_(None)),
        deleted_visitors=_count_visitors(db, Visitor.deleted_at.is_not(None)),
        today_visitors=_count_visitors(
            db, Visitor.check_in_time >= today_start, Visitor.check_in_time < tomorrow_start,
        ),
    )

    if is_approver(role):
        stats.pending_edit_requests = _count_pending(db, EditRequest)
        stats.pending_deletion_requests = _count_pending(db, DeletionRequest)

    this_week = _count_visitors(
        db, Visitor.check_in_time >= this_week_start, Visitor.check_in_time < next_week_start,
    )
    last_week = _count_visitors(
        db, Visitor.check_in_time >= last_week_start, Visitor.check_in_time < this_week_start,
    )
    stats.weekly_growth = weekly_growth(this_week, last_week)

    logger.debug("Dashboard stats for role %s: %s", role, stats.model_dump())
    return stats
