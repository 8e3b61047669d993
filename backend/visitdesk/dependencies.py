"""Request-scoped dependencies shared by the routers."""
from typing import Optional

from fastapi import Depends, Header

from visitdesk.exceptions import PermissionDeniedError
from visitdesk.models.user import is_approver
from visitdesk.schemas.actor import Actor


def get_current_actor(
    x_user_id: int = Header(..., description="Authenticated user id"),
    x_user_role: str = Header(..., description="Authenticated user role"),
    x_user_name: Optional[str] = Header(None, description="Display name, resolved from users when absent"),
) -> Actor:
    """Actor descriptor forwarded by the authenticating gateway."""
    return Actor(id=x_user_id, role=x_user_role, display_name=x_user_name)


def require_approver(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not is_approver(actor.role):
        raise PermissionDeniedError("Only Admin or Manager can perform this action")
    return actor
