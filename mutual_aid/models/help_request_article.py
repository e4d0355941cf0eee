"""HelpRequestArticle ORM — one line item of a help request.

Invariants:
    - Always belongs to a HelpRequest (help_request_id FK, cascade delete)
    - position is 0-based and dense within its help request
    - quantity >= 1 (enforced at the API boundary)
"""

import uuid

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from mutual_aid.db.base import Base


class HelpRequestArticle(Base):
    """Article line — description and quantity."""
    __tablename__ = "help_request_articles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    help_request_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("help_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
