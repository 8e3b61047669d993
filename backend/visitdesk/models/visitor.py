"""Visitor ORM model: the record store, soft-deleted via ``deleted_at``."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from visitdesk.database import Base

# Fields an operator may change, directly or through an edit request.
EDITABLE_FIELDS = (
    "full_name",
    "phone_number",
    "email",
    "address",
    "institution",
    "purpose",
    "person_to_meet",
    "location",
    "id_number",
    "id_type",
    "document_type",
)


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    institution = Column(String(255), nullable=True)
    purpose = Column(Text, nullable=True)
    person_to_meet = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    id_number = Column(String(50), nullable=True)
    id_type = Column(String(50), nullable=True)  # KTP, SIM, Passport, ...
    document_type = Column(String(50), nullable=True)
    check_in_time = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    check_out_time = Column(DateTime(timezone=True), nullable=True)
    input_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    input_by_name = Column(String(255), nullable=True)
    checkout_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    checkout_by_name = Column(String(255), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
    deleted_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
