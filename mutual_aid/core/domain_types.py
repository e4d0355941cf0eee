"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - HelpRequestId, UserId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - ME_SENTINEL never reaches the query layer (resolved by the service)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Case-insensitive status parsing: clients send "Pending" as often as "pending"
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

HelpRequestId = NewType("HelpRequestId", UUID)
UserId = NewType("UserId", UUID)

# Query-string alias for "the calling principal"
ME_SENTINEL = "me"


# ─── Enums ───────────────────────────────────────────────────────

class HelpRequestStatus(str, Enum):
    """Help request lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    SHOPPING = "shopping"
    DELIVERED = "delivered"
    DONE = "done"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value: object) -> "HelpRequestStatus | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None



# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class UserProfile:
    """Display profile resolved by the user directory — never persisted with a request."""
    id: UserId
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
