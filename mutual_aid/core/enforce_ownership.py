"""Ownership Enforcement — who may change what on a help request.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Raise a MutualAidError subclass on violation, return None on success
    - zip code and articles: requester only, never on a terminal request
    - -> accepted: anyone except the requester (the caller becomes the helper)
    - -> shopping / delivered: the assigned helper only
    - -> done / cancelled: the requester or the assigned helper
    - re-requesting the current status: the requester or the assigned helper (a no-op)

Design Decisions:
    - Plain ids and statuses as arguments, not ORM rows: testable without a DB
    - Transition legality is checked by status_model before these rules run, so an
      illegal edge reports InvalidTransitionError rather than a permissions error
"""

from mutual_aid.core.domain_types import HelpRequestStatus, UserId
from mutual_aid.core.errors import (
    ErrorContext, HelpRequestClosedError, OwnershipError,
)
from mutual_aid.core.status_model import is_terminal

_HELPER_ONLY = frozenset({HelpRequestStatus.SHOPPING, HelpRequestStatus.DELIVERED})


def check_content_edit(
    requester_id: UserId,
    status: HelpRequestStatus,
    principal_id: UserId,
    context: ErrorContext | None = None,
) -> None:
    """Zip code and article edits belong to the requester while the request is open."""
    if principal_id != requester_id:
        raise OwnershipError(
            "Only the requester can change the zip code or articles", context,
        )
    if is_terminal(status):
        raise HelpRequestClosedError(HelpRequestStatus(status).value, context)


def check_status_change(
    requester_id: UserId,
    helper_id: UserId | None,
    to_status: HelpRequestStatus,
    principal_id: UserId,
    context: ErrorContext | None = None,
) -> None:
    """Status edits: see module invariants for the per-target rule."""
    target = HelpRequestStatus(to_status)

    if target == HelpRequestStatus.ACCEPTED:
        if principal_id == requester_id:
            raise OwnershipError(
                "Requesters cannot accept their own help request", context,
            )
        return

    if target in _HELPER_ONLY:
        if helper_id is None or principal_id != helper_id:
            raise OwnershipError(
                f"Only the assigned helper can mark a help request as {target.value}",
                context,
            )
        return

    if principal_id != requester_id and principal_id != helper_id:
        raise OwnershipError(
            f"Only the requester or the assigned helper can mark a help request as {target.value}",
            context,
        )


def check_participant(
    requester_id: UserId,
    helper_id: UserId | None,
    principal_id: UserId,
    context: ErrorContext | None = None,
) -> None:
    """Only the requester or the assigned helper may touch the request's status."""
    if principal_id != requester_id and principal_id != helper_id:
        raise OwnershipError(
            "Only the requester or the assigned helper can update this help request's status",
            context,
        )
