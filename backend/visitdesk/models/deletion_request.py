"""DeletionRequest ORM model: a pending soft delete awaiting approval."""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index, Enum as SAEnum, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from visitdesk.database import Base
from visitdesk.models.enums import RequestStatus


class DeletionRequest(Base):
    __tablename__ = "deletion_requests"
    __table_args__ = (
        # At most one pending deletion request per visitor.
        Index(
            "uq_deletion_requests_pending",
            "visitor_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id"), nullable=False, index=True)
    requested_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reason = Column(Text, nullable=False)
    status = Column(SAEnum(RequestStatus, native_enum=False, length=20), nullable=False, default=RequestStatus.pending, index=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    audit_entries = relationship(
        "DeletionAuditLog",
        back_populates="deletion_request",
        order_by="DeletionAuditLog.id",
    )
