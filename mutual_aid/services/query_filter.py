"""Query Filter Engine — HelpRequestCriteria -> one SELECT against help_requests.

Invariants:
    - Criteria combine with AND; an empty set adds no predicate
    - include_requester never reaches the WHERE clause (projection only)
    - Results ordered by creation (created_at, then id as tiebreaker)

Design Decisions:
    - Requester equality appended first: most selective, hits the requester_id index
    - Sets sorted before IN (...): deterministic SQL, stable statement cache keys
"""

from sqlalchemy import Select, select

from mutual_aid.core.help_request_criteria import HelpRequestCriteria
from mutual_aid.models.help_request import HelpRequest


def build_help_request_query(criteria: HelpRequestCriteria) -> Select:
    """Translate criteria into a single ordered SELECT."""
    query = select(HelpRequest)
    if criteria.requester_id is not None:
        query = query.where(HelpRequest.requester_id == criteria.requester_id)
    if criteria.zip_codes:
        query = query.where(HelpRequest.zip_code.in_(sorted(criteria.zip_codes)))
    if criteria.statuses:
        query = query.where(
            HelpRequest.status.in_(sorted(s.value for s in criteria.statuses)),
        )
    return query.order_by(HelpRequest.created_at, HelpRequest.id)
