"""Role-scoped visitor listings annotated with pending-request status.

Each visitor is correlated with its latest *pending* deletion request and its
latest *pending* edit request. Resolved requests never mask a current pending
one. The computed status follows a fixed precedence:
deleted > pending_delete > pending_edit > active.
"""
import logging
from typing import Any, Optional

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session, aliased

from visitdesk.exceptions import PermissionDeniedError
from visitdesk.models.deletion_request import DeletionRequest
from visitdesk.models.edit_request import EditRequest
from visitdesk.models.enums import ComputedStatus, RequestStatus, ViewType
from visitdesk.models.user import Role, User
from visitdesk.models.visitor import Visitor
from visitdesk.schemas.visitor import AnnotatedVisitorOut, PendingRequestInfo, VisitorFilters, VisitorOut

logger = logging.getLogger(__name__)

# Fixed access matrix; not configurable at runtime.
ALLOWED_VIEW_TYPES: dict[Role, frozenset[ViewType]] = {
    Role.receptionist: frozenset({ViewType.active, ViewType.pending_requests}),
    Role.admin: frozenset({
        ViewType.active, ViewType.pending_deletion, ViewType.pending_edit, ViewType.deleted, ViewType.all,
    }),
    Role.manager: frozenset({
        ViewType.active, ViewType.pending_deletion, ViewType.pending_edit, ViewType.deleted, ViewType.all,
    }),
}

LIKE_ESCAPE = "\\"

_STATUS_PRIORITY = {
    ComputedStatus.pending_delete.value: 1,
    ComputedStatus.pending_edit.value: 2,
    ComputedStatus.active.value: 3,
    ComputedStatus.deleted.value: 4,
}


def allowed_view_types(role: Any) -> frozenset[ViewType]:
    try:
        return ALLOWED_VIEW_TYPES.get(Role(role), frozenset())
    except ValueError:
        return frozenset()


def check_view_access(role: Any, view_type: Any) -> tuple[Role, ViewType]:
    """Validate ``view_type`` for ``role``; a disallowed view is a permission failure."""
    try:
        parsed_view = ViewType(view_type)
    except ValueError:
        raise PermissionDeniedError(f"View type '{view_type}' not allowed for role '{role}'") from None
    if parsed_view not in allowed_view_types(role):
        raise PermissionDeniedError(f"View type '{parsed_view.value}' not allowed for role '{role}'")
    return Role(role), parsed_view


def _latest_pending(model):
    """Subquery: visitor_id → id of the newest pending request of ``model``."""
    return (
        select(model.visitor_id.label("visitor_id"), func.max(model.id).label("request_id"))
        .where(model.status == RequestStatus.pending)
        .group_by(model.visitor_id)
        .subquery()
    )


def _view_predicates(role: Role, view_type: ViewType, dr, er) -> list:
    not_deleted = Visitor.deleted_at.is_(None)
    no_pending = and_(dr.id.is_(None), er.id.is_(None))

    if view_type is ViewType.active:
        return [not_deleted, no_pending]
    if view_type is ViewType.pending_requests:
        return [not_deleted, or_(dr.id.is_not(None), er.id.is_not(None))]
    if view_type is ViewType.pending_deletion:
        return [dr.id.is_not(None)]
    if view_type is ViewType.pending_edit:
        return [er.id.is_not(None)]
    if view_type is ViewType.deleted:
        return [Visitor.deleted_at.is_not(None)]
    if view_type is ViewType.all:
        return []
    raise PermissionDeniedError(f"View type '{view_type.value}' not allowed for role '{role.value}'")


def _contains(value: str) -> str:
    """LIKE pattern matching ``value`` as a literal substring."""
    escaped = value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
    for wildcard in ("%", "_"):
        escaped = escaped.replace(wildcard, LIKE_ESCAPE + wildcard)
    return f"%{escaped}%"


def _filter_predicates(filters: VisitorFilters) -> list:
    predicates = []
    if filters.search:
        pattern = _contains(filters.search)
        predicates.append(or_(
            Visitor.full_name.ilike(pattern, escape=LIKE_ESCAPE),
            Visitor.institution.ilike(pattern, escape=LIKE_ESCAPE),
            Visitor.purpose.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    if filters.location:
        predicates.append(Visitor.location.ilike(_contains(filters.location), escape=LIKE_ESCAPE))
    if filters.start_date:
        predicates.append(Visitor.check_in_time >= filters.start_date)
    if filters.end_date:
        predicates.append(Visitor.check_in_time <= filters.end_date)
    return predicates


def _pending_info(request_id, reason, requested_at, name, role) -> Optional[PendingRequestInfo]:
    if request_id is None:
        return None
    return PendingRequestInfo(
        id=request_id,
        reason=reason,
        requested_at=requested_at,
        requested_by_name=name,
        requested_by_role=role,
    )


def find_by_role_and_view(
    db: Session,
    filters: Optional[VisitorFilters],
    role: Any,
    view_type: Any = ViewType.active,
) -> list[AnnotatedVisitorOut]:
    """List visitors the role may see for ``view_type``, annotated with computed status."""
    role, view_type = check_view_access(role, view_type)
    filters = filters or VisitorFilters()

    pending_dr = _latest_pending(DeletionRequest)
    pending_er = _latest_pending(EditRequest)
    dr = aliased(DeletionRequest)
    er = aliased(EditRequest)
    deleted_user = aliased(User)
    dr_requester = aliased(User)

    computed_status = case(
        (Visitor.deleted_at.is_not(None), ComputedStatus.deleted.value),
        (dr.id.is_not(None), ComputedStatus.pending_delete.value),
        (er.id.is_not(None), ComputedStatus.pending_edit.value),
        else_=ComputedStatus.active.value,
    ).label("computed_status")

    query = (
        db.query(
            Visitor,
            computed_status,
            deleted_user.name.label("deleted_by_name"),
            dr.id, dr.reason, dr.created_at, dr_requester.name, dr_requester.role,
            er.id, er.reason, er.created_at, er.requested_by_name, er.requested_by_role,
        )
        .outerjoin(deleted_user, deleted_user.id == Visitor.deleted_by)
        .outerjoin(pending_dr, pending_dr.c.visitor_id == Visitor.id)
        .outerjoin(dr, dr.id == pending_dr.c.request_id)
        .outerjoin(dr_requester, dr_requester.id == dr.requested_by)
        .outerjoin(pending_er, pending_er.c.visitor_id == Visitor.id)
        .outerjoin(er, er.id == pending_er.c.request_id)
    )

    predicates = _view_predicates(role, view_type, dr, er) + _filter_predicates(filters)
    if predicates:
        query = query.filter(and_(*predicates))

    if role in (Role.admin, Role.manager):
        priority = case(
            *[(computed_status == status, rank) for status, rank in _STATUS_PRIORITY.items()],
            else_=len(_STATUS_PRIORITY) + 1,
        )
        query = query.order_by(priority, Visitor.check_in_time.desc(), Visitor.id.desc())
    else:
        query = query.order_by(Visitor.check_in_time.desc(), Visitor.id.desc())

    if filters.limit:
        query = query.limit(filters.limit)

    results = []
    for row in query.all():
        (visitor, status, deleted_by_name,
         dr_id, dr_reason, dr_at, dr_name, dr_role,
         er_id, er_reason, er_at, er_name, er_role) = row
        base = VisitorOut.model_validate(visitor).model_dump()
        results.append(AnnotatedVisitorOut(
            **base,
            computed_status=status,
            deleted_by_name=deleted_by_name,
            pending_deletion=_pending_info(dr_id, dr_reason, dr_at, dr_name,
                                           dr_role.value if isinstance(dr_role, Role) else dr_role),
            pending_edit=_pending_info(er_id, er_reason, er_at, er_name, er_role),
        ))

    logger.debug("View %s for role %s returned %d visitors", view_type.value, role.value, len(results))
    return results
