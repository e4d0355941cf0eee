"""Status Model — legal lifecycle transitions for a help request.

Invariants:
    - Workflow only moves forward: pending -> accepted -> shopping -> delivered -> done
    - cancelled is reachable from every non-terminal state
    - done and cancelled are terminal: no edge leaves them
    - Any pair not listed in _TRANSITIONS is illegal (no implicit edges)

Design Decisions:
    - Adjacency dict of frozensets: the whole state machine is readable in one place
    - check_transition raises, can_transition answers: the service needs the former,
      listings and tests the latter
"""

from mutual_aid.core.domain_types import HelpRequestStatus
from mutual_aid.core.errors import ErrorContext, InvalidTransitionError

INITIAL_STATUS = HelpRequestStatus.PENDING

TERMINAL_STATUSES: frozenset[HelpRequestStatus] = frozenset({
    HelpRequestStatus.DONE,
    HelpRequestStatus.CANCELLED,
})

_TRANSITIONS: dict[HelpRequestStatus, frozenset[HelpRequestStatus]] = {
    HelpRequestStatus.PENDING: frozenset({
        HelpRequestStatus.ACCEPTED, HelpRequestStatus.CANCELLED,
    }),
    HelpRequestStatus.ACCEPTED: frozenset({
        HelpRequestStatus.SHOPPING, HelpRequestStatus.CANCELLED,
    }),
    HelpRequestStatus.SHOPPING: frozenset({
        HelpRequestStatus.DELIVERED, HelpRequestStatus.CANCELLED,
    }),
    HelpRequestStatus.DELIVERED: frozenset({
        HelpRequestStatus.DONE, HelpRequestStatus.CANCELLED,
    }),
    HelpRequestStatus.DONE: frozenset(),
    HelpRequestStatus.CANCELLED: frozenset(),
}


def is_terminal(status: HelpRequestStatus) -> bool:
    return HelpRequestStatus(status) in TERMINAL_STATUSES


def allowed_transitions(from_status: HelpRequestStatus) -> list[HelpRequestStatus]:
    """Legal next states, in workflow order."""
    targets = _TRANSITIONS[HelpRequestStatus(from_status)]
    return [s for s in HelpRequestStatus if s in targets]


def can_transition(
    from_status: HelpRequestStatus, to_status: HelpRequestStatus,
) -> bool:
    return HelpRequestStatus(to_status) in _TRANSITIONS[HelpRequestStatus(from_status)]


def check_transition(
    from_status: HelpRequestStatus,
    to_status: HelpRequestStatus,
    context: ErrorContext | None = None,
) -> None:
    """Raise InvalidTransitionError unless from_status -> to_status is an edge."""
    if not can_transition(from_status, to_status):
        ctx = context or ErrorContext()
        ctx.debug_info = {
            "allowed": [s.value for s in allowed_transitions(from_status)],
        }
        raise InvalidTransitionError(
            HelpRequestStatus(from_status).value,
            HelpRequestStatus(to_status).value,
            ctx,
        )
