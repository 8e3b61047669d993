"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Visitor Desk back office:
users, visitors, visitor_edit_requests, deletion_requests,
deletion_audit_logs, plus the partial unique indexes that allow at most
one pending request per visitor per kind.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PENDING_ONLY = sa.text("status = 'pending'")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="Receptionist"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- visitors ---
    op.create_table(
        "visitors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("institution", sa.String(255), nullable=True),
        sa.Column("purpose", sa.Text, nullable=True),
        sa.Column("person_to_meet", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("id_number", sa.String(50), nullable=True),
        sa.Column("id_type", sa.String(50), nullable=True),
        sa.Column("document_type", sa.String(50), nullable=True),
        sa.Column("check_in_time", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("check_out_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("input_by_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("input_by_name", sa.String(255), nullable=True),
        sa.Column("checkout_by_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("checkout_by_name", sa.String(255), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_visitors_check_in_time", "visitors", ["check_in_time"])
    op.create_index("ix_visitors_deleted_at", "visitors", ["deleted_at"])

    # --- visitor_edit_requests ---
    op.create_table(
        "visitor_edit_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("visitor_id", sa.Integer, sa.ForeignKey("visitors.id"), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("original_data", sa.JSON, nullable=True),
        sa.Column("proposed_data", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("requested_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("requested_by_name", sa.String(255), nullable=False),
        sa.Column("requested_by_role", sa.String(50), nullable=False),
        sa.Column("processed_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("processed_by_name", sa.String(255), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_visitor_edit_requests_visitor_id", "visitor_edit_requests", ["visitor_id"])
    op.create_index("ix_visitor_edit_requests_status", "visitor_edit_requests", ["status"])
    op.create_index(
        "uq_visitor_edit_requests_pending",
        "visitor_edit_requests",
        ["visitor_id"],
        unique=True,
        sqlite_where=PENDING_ONLY,
        postgresql_where=PENDING_ONLY,
    )

    # --- deletion_requests ---
    op.create_table(
        "deletion_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("visitor_id", sa.Integer, sa.ForeignKey("visitors.id"), nullable=False),
        sa.Column("requested_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("approved_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_deletion_requests_visitor_id", "deletion_requests", ["visitor_id"])
    op.create_index("ix_deletion_requests_status", "deletion_requests", ["status"])
    op.create_index(
        "uq_deletion_requests_pending",
        "deletion_requests",
        ["visitor_id"],
        unique=True,
        sqlite_where=PENDING_ONLY,
        postgresql_where=PENDING_ONLY,
    )

    # --- deletion_audit_logs ---
    op.create_table(
        "deletion_audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("deletion_request_id", sa.Integer, sa.ForeignKey("deletion_requests.id"), nullable=False),
        sa.Column("visitor_id", sa.Integer, sa.ForeignKey("visitors.id"), nullable=True),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("performed_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("action_details", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_deletion_audit_logs_deletion_request_id", "deletion_audit_logs", ["deletion_request_id"])
    op.create_index("ix_deletion_audit_logs_visitor_id", "deletion_audit_logs", ["visitor_id"])
    op.create_index("ix_deletion_audit_logs_created_at", "deletion_audit_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("deletion_audit_logs")
    op.drop_table("deletion_requests")
    op.drop_table("visitor_edit_requests")
    op.drop_table("visitors")
    op.drop_table("users")
