"""DeletionAuditLog ORM model: append-only trail of deletion-request transitions."""
from sqlalchemy import Column, Integer, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from visitdesk.database import Base
from visitdesk.models.enums import AuditAction


class DeletionAuditLog(Base):
    __tablename__ = "deletion_audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    deletion_request_id = Column(Integer, ForeignKey("deletion_requests.id"), nullable=False, index=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id"), nullable=True, index=True)
    action = Column(SAEnum(AuditAction, native_enum=False, length=20), nullable=False)
    performed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    action_details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    deletion_request = relationship("DeletionRequest", back_populates="audit_entries")
