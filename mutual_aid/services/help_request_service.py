"""Help Request Service — create, read, list and update help requests.

Invariants:
    - requester_id is always the calling principal, never a payload value
    - New requests start in the status model's initial state
    - A status change passes check_transition before any ownership rule runs
    - "me" is resolved to the principal here; the query engine never sees it
    - get() is a pure lookup; requester profiles are attached only on request
    - An update that changes nothing is authorized like any other but writes nothing

Design Decisions:
    - Update rules run inside the store's atomic section (mutate callback), so they
      are evaluated against the row being written
    - Listing is not ownership-restricted: any authenticated user may browse all
      requests (bulletin board for helpers), narrowing is opt-in via userId
    - Logger injected through the constructor; no correctness depends on it
"""

import logging
from typing import Iterable
from uuid import UUID

from mutual_aid.auth.models import Principal
from mutual_aid.core.domain_types import (
    HelpRequestId, HelpRequestStatus, ME_SENTINEL, UserId,
)
from mutual_aid.core.enforce_ownership import (
    check_content_edit, check_participant, check_status_change,
)
from mutual_aid.core.errors import ErrorContext, ValidationError
from mutual_aid.core.help_request_criteria import HelpRequestCriteria
from mutual_aid.core.repository_protocols import UserDirectory
from mutual_aid.core.status_model import INITIAL_STATUS, check_transition
from mutual_aid.models.help_request import HelpRequest
from mutual_aid.models.help_request_article import HelpRequestArticle
from mutual_aid.schemas.help_request import (
    ArticleInput, HelpRequestCreate, HelpRequestFilters, HelpRequestUpdate,
)
from mutual_aid.services.help_request_store import HelpRequestStore


def _build_articles(articles: Iterable[ArticleInput]) -> list[HelpRequestArticle]:
    return [
        HelpRequestArticle(
            position=i, description=a.description, quantity=a.quantity,
        )
        for i, a in enumerate(articles)
    ]


def _article_lines(articles) -> list[tuple[str, int]]:
    return [(a.description, a.quantity) for a in articles]


def build_criteria(
    filters: HelpRequestFilters, principal: Principal,
) -> HelpRequestCriteria:
    """Resolve raw listing filters into criteria for the query engine."""
    requester_id: UserId | None = None
    if filters.user_id:
        if filters.user_id == ME_SENTINEL:
            requester_id = UserId(principal.user_id)
        else:
            try:
                requester_id = UserId(UUID(filters.user_id))
            except ValueError:
                raise ValidationError(
                    f"userId must be '{ME_SENTINEL}' or a user id", "userId",
                )

    statuses: set[HelpRequestStatus] = set()
    for raw in filters.statuses:
        try:
            statuses.add(HelpRequestStatus(raw))
        except ValueError:
            raise ValidationError(f"Unknown status '{raw}'", "status")

    return HelpRequestCriteria(
        requester_id=requester_id,
        zip_codes=frozenset(z.strip() for z in filters.zip_codes if z.strip()),
        statuses=frozenset(statuses),
        include_requester=filters.include_requester,
    )


def apply_update(
    record: HelpRequest, payload: HelpRequestUpdate, principal_id: UserId,
) -> bool:
    """Validate every requested change against the current row, then apply them.

    Returns True when the record changed. Values equal to the stored ones are
    still authorized but not written.
    """
    ctx = ErrorContext(
        help_request_id=str(record.id), user_id=str(principal_id),
    )
    requester_id = UserId(record.requester_id)
    helper_id = UserId(record.helper_id) if record.helper_id else None
    current = HelpRequestStatus(record.status)
    target = payload.status if payload.status is not None and payload.status != current else None

    if target is not None:
        check_transition(current, target, ctx)
        check_status_change(requester_id, helper_id, target, principal_id, ctx)
    elif payload.status is not None:
        check_participant(requester_id, helper_id, principal_id, ctx)
    if payload.zip_code is not None or payload.articles is not None:
        check_content_edit(requester_id, current, principal_id, ctx)

    changed = False
    if payload.zip_code is not None and payload.zip_code != record.zip_code:
        record.zip_code = payload.zip_code
        changed = True
    if payload.articles is not None and _article_lines(payload.articles) != _article_lines(record.articles):
        record.articles = _build_articles(payload.articles)
        changed = True
    if target is not None:
        if target == HelpRequestStatus.ACCEPTED:
            record.helper_id = principal_id
        record.status = target.value
        changed = True
    return changed


class HelpRequestService:
    """Orchestrates the help request lifecycle over the store and user directory."""

    def __init__(
        self,
        store: HelpRequestStore,
        directory: UserDirectory,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.directory = directory
        self._logger = logger or logging.getLogger(__name__)

    async def get_all(
        self, filters: HelpRequestFilters, principal: Principal,
    ) -> list[HelpRequest]:
        criteria = build_criteria(filters, principal)
        records = await self.store.find_many(criteria)
        if criteria.include_requester:
            profiles = await self.directory.get_many(
                UserId(r.requester_id) for r in records
            )
            for record in records:
                record.requester = profiles.get(UserId(record.requester_id))
        self._logger.debug(
            f"Listed {len(records)} help requests",
            extra={"user_id": str(principal.user_id), "criteria": criteria.describe()},
        )
        return records

    async def create(
        self, payload: HelpRequestCreate, requester_id: UserId,
    ) -> HelpRequest:
        if not payload.articles:
            raise ValidationError(
                "A help request needs at least one article", "articles",
                ErrorContext(user_id=str(requester_id)),
            )
        record = HelpRequest(
            requester_id=requester_id,
            zip_code=payload.zip_code,
            status=INITIAL_STATUS.value,
            articles=_build_articles(payload.articles),
        )
        record = await self.store.insert(record)
        self._logger.info(
            f"Help request {record.id} created",
            extra={"help_request_id": str(record.id), "user_id": str(requester_id)},
        )
        return record

    async def get(self, help_request_id: HelpRequestId) -> HelpRequest | None:
        return await self.store.find_by_id(help_request_id)

    async def attach_requester(self, record: HelpRequest) -> HelpRequest:
        """Resolve the requester profile onto the record (None if unknown)."""
        record.requester = await self.directory.get_by_id(UserId(record.requester_id))
        return record

    async def update(
        self,
        help_request_id: HelpRequestId,
        payload: HelpRequestUpdate,
        principal: Principal,
    ) -> HelpRequest:
        if payload.articles is not None and not payload.articles:
            raise ValidationError(
                "A help request needs at least one article", "articles",
                ErrorContext(help_request_id=str(help_request_id)),
            )
        principal_id = UserId(principal.user_id)
        record = await self.store.update(
            help_request_id,
            lambda r: apply_update(r, payload, principal_id),
        )
        self._logger.info(
            f"Help request {help_request_id} updated",
            extra={
                "help_request_id": str(help_request_id),
                "user_id": str(principal_id),
            },
        )
        return record
