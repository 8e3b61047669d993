"""User ORM model: the identity collaborator for actor names and roles."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from visitdesk.database import Base


class Role(str, enum.Enum):
    admin = "Admin"
    manager = "Manager"
    receptionist = "Receptionist"


APPROVER_ROLES = frozenset({Role.admin, Role.manager})


def is_approver(role) -> bool:
    """True for roles entitled to approve or reject pending requests."""
    try:
        return Role(role) in APPROVER_ROLES
    except ValueError:
        return False


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(
        SAEnum(Role, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.receptionist,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
