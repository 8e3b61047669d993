"""EditRequest ORM model: a pending field edit awaiting approval."""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, Index, Enum as SAEnum, text
from sqlalchemy.sql import func
from visitdesk.database import Base
from visitdesk.models.enums import RequestStatus


class EditRequest(Base):
    __tablename__ = "visitor_edit_requests"
    __table_args__ = (
        # At most one pending edit request per visitor.
        Index(
            "uq_visitor_edit_requests_pending",
            "visitor_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id"), nullable=False, index=True)
    reason = Column(Text, nullable=False)
    original_data = Column(JSON, nullable=True)
    proposed_data = Column(JSON, nullable=False)
    status = Column(SAEnum(RequestStatus, native_enum=False, length=20), nullable=False, default=RequestStatus.pending, index=True)
    requested_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    requested_by_name = Column(String(255), nullable=False)
    requested_by_role = Column(String(50), nullable=False)
    processed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_by_name = Column(String(255), nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
