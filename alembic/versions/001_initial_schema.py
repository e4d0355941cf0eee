"""Initial schema — users, help_requests, help_request_articles.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "help_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("requester_id", UUID(as_uuid=True), nullable=False),
        sa.Column("helper_id", UUID(as_uuid=True), nullable=True),
        sa.Column("zip_code", sa.String(10), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_help_requests_requester_id", "help_requests", ["requester_id"])
    op.create_index("ix_help_requests_helper_id", "help_requests", ["helper_id"])
    op.create_index("ix_help_requests_zip_code", "help_requests", ["zip_code"])
    op.create_index("ix_help_requests_status", "help_requests", ["status"])

    op.create_table(
        "help_request_articles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "help_request_id", UUID(as_uuid=True),
            sa.ForeignKey("help_requests.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
    )
    op.create_index(
        "ix_help_request_articles_help_request_id",
        "help_request_articles", ["help_request_id"],
    )


def downgrade() -> None:
    op.drop_table("help_request_articles")
    op.drop_table("help_requests")
    op.drop_table("users")
