"""Identity resolution: fills an actor's display name from the users table."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from visitdesk.models.user import User
from visitdesk.schemas.actor import Actor

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"


def lookup_user_name(db: Session, user_id: Optional[int]) -> Optional[str]:
    """Return the display name for ``user_id`` or None when unknown."""
    if user_id is None:
        return None
    user = db.get(User, user_id)
    return user.name if user else None


def resolve_actor(db: Session, actor: Actor) -> Actor:
    """Return a copy of ``actor`` whose display name is always populated."""
    if actor.display_name:
        return actor
    name = lookup_user_name(db, actor.id)
    if name is None:
        logger.warning("Could not resolve display name for user %s", actor.id)
        name = UNKNOWN_USER
    return actor.model_copy(update={"display_name": name})
