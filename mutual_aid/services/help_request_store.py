"""Help Request Store — durable storage and retrieval of help requests.

Invariants:
    - insert refuses a record without articles (PersistenceError, nothing written)
    - update is all-or-nothing per id: row lock where supported, optimistic version
      check always; a lost race replays the read-modify-write on fresh state
    - mutate callbacks may raise MutualAidError: the transaction is rolled back and
      the error propagates unchanged
    - updated_at and version move only when the mutation reports a change; a no-op
      update ends the transaction without writing

Design Decisions:
    - Mutation passed as a callback: ownership and transition checks run against the
      row actually being written, not a copy read earlier in the request
    - SELECT ... FOR UPDATE plus version_id_col: PostgreSQL serializes on the lock,
      SQLite (no FOR UPDATE) falls back to the version check and replay
"""

import logging
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from mutual_aid.core.domain_types import HelpRequestId
from mutual_aid.core.errors import (
    ConcurrencyError, ErrorContext, PersistenceError, ResourceNotFoundError,
)
from mutual_aid.core.help_request_criteria import HelpRequestCriteria
from mutual_aid.models.help_request import HelpRequest, utcnow
from mutual_aid.services.query_filter import build_help_request_query

MutateFn = Callable[[HelpRequest], bool]


class HelpRequestStore:
    """Persistence for HelpRequest aggregates (articles included)."""

    def __init__(
        self,
        db: AsyncSession,
        max_update_attempts: int = 5,
        logger: logging.Logger | None = None,
    ):
        self.db = db
        self.max_update_attempts = max(1, max_update_attempts)
        self._logger = logger or logging.getLogger(__name__)

    async def insert(self, record: HelpRequest) -> HelpRequest:
        """Persist a new help request; id and timestamps assigned here."""
        if not record.articles:
            raise PersistenceError(
                "help request must contain at least one article", "insert",
                ErrorContext(user_id=str(record.requester_id)),
            )
        now = utcnow()
        record.created_at = now
        record.updated_at = now
        self.db.add(record)
        await self.db.commit()
        return record

    async def find_by_id(self, help_request_id: HelpRequestId) -> HelpRequest | None:
        result = await self.db.execute(
            select(HelpRequest).where(HelpRequest.id == help_request_id),
        )
        return result.scalar_one_or_none()

    async def find_many(self, criteria: HelpRequestCriteria) -> list[HelpRequest]:
        """All records matching every active criterion, in creation order."""
        result = await self.db.execute(build_help_request_query(criteria))
        return list(result.scalars().all())

    async def update(
        self, help_request_id: HelpRequestId, mutate: MutateFn,
    ) -> HelpRequest:
        """Atomically apply mutate() to the current row and commit.

        mutate returns True when it changed the record.
        """
        for attempt in range(1, self.max_update_attempts + 1):
            record = await self._load_for_update(help_request_id)
            if record is None:
                await self.db.rollback()
                raise ResourceNotFoundError(
                    "HelpRequest", str(help_request_id),
                    ErrorContext(help_request_id=str(help_request_id)),
                )
            try:
                if mutate(record):
                    record.updated_at = utcnow()
                await self.db.commit()
            except StaleDataError:
                await self.db.rollback()
                self._logger.warning(
                    f"Concurrent update on help request {help_request_id}, replaying",
                    extra={"help_request_id": str(help_request_id), "attempt": attempt},
                )
                continue
            except Exception:
                await self.db.rollback()
                raise
            return record

        raise ConcurrencyError(
            f"Help request {help_request_id} is being modified concurrently, try again",
            ErrorContext(
                help_request_id=str(help_request_id),
                debug_info={"attempts": self.max_update_attempts},
            ),
        )

    async def _load_for_update(
        self, help_request_id: HelpRequestId,
    ) -> HelpRequest | None:
        result = await self.db.execute(
            select(HelpRequest)
            .where(HelpRequest.id == help_request_id)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()
