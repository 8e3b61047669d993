"""User API routes: the identity collaborator."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from visitdesk.database import atomic, get_db
from visitdesk.exceptions import ConflictError, NotFoundError, ValidationError
from visitdesk.models.user import Role, User
from visitdesk.schemas.user import UserCreate, UserOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Create a user with a role (Admin, Manager or Receptionist)."""
    try:
        role = Role(payload.role)
    except ValueError:
        raise ValidationError(f"Unknown role '{payload.role}'") from None
    if db.query(User).filter(User.email == payload.email).first():
        raise ConflictError("A user with this email already exists")

    user = User(name=payload.name, email=payload.email, role=role)
    with atomic(db):
        db.add(user)
    db.refresh(user)
    logger.info("Created user %s (%s, %s)", user.id, user.name, role.value)
    return user


@router.get("/", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    """List all users."""
    return db.query(User).order_by(User.id).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    """Fetch a single user by ID."""
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
