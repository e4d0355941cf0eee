"""HelpRequest ORM — persists the aggregate root of an errand.

Invariants:
    - id is UUID primary key, assigned on insert, never changes
    - requester_id is set on insert and never changes
    - helper_id is set once, by the pending -> accepted transition
    - status holds a HelpRequestStatus value; transitions validated by core/status_model.py
    - version is bumped by SQLAlchemy on every UPDATE (optimistic concurrency)

Design Decisions:
    - requester_id / helper_id without FK to users: the directory is an external
      collaborator and may live elsewhere
    - articles as an owned, ordered child collection (cascade delete-orphan, no back-reference)
    - requester is a plain instance attribute, not a column: attached only on reads that ask
"""

import uuid
from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from mutual_aid.core.domain_types import HelpRequestStatus, UserProfile
from mutual_aid.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HelpRequest(Base):
    """Help request aggregate — owns its article lines."""
    __tablename__ = "help_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    requester_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    helper_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True,
    )
    zip_code: Mapped[str] = mapped_column(
        String(10), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
        default=HelpRequestStatus.PENDING.value,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    articles: Mapped[list["HelpRequestArticle"]] = relationship(
        "HelpRequestArticle",
        cascade="all, delete-orphan",
        order_by="HelpRequestArticle.position",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    # Not mapped; the service sets it per instance when a read asks for the profile
    requester: ClassVar[UserProfile | None] = None
