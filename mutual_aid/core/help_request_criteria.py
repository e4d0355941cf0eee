"""Help Request Criteria — the resolved filter set handed to the query engine.

Invariants:
    - requester_id is always a concrete UserId (the "me" sentinel is resolved upstream)
    - Empty zip_codes / statuses mean "no restriction", never "match nothing"
    - include_requester is a projection flag; it never changes which records match

Design Decisions:
    - Frozen dataclass with frozensets: hashable, order-independent, safe to log
"""

from dataclasses import dataclass, field

from mutual_aid.core.domain_types import HelpRequestStatus, UserId


@dataclass(frozen=True)
class HelpRequestCriteria:
    """Conjunctive listing filter — every non-empty criterion must match."""

    requester_id: UserId | None = None
    zip_codes: frozenset[str] = field(default_factory=frozenset)
    statuses: frozenset[HelpRequestStatus] = field(default_factory=frozenset)
    include_requester: bool = False

    def describe(self) -> dict:
        """Loggable summary of the active criteria."""
        return {
            "requester_id": str(self.requester_id) if self.requester_id else None,
            "zip_codes": sorted(self.zip_codes),
            "statuses": sorted(s.value for s in self.statuses),
            "include_requester": self.include_requester,
        }
