"""User Directory — resolves user ids to display profiles from the users table.

Invariants:
    - Unknown ids resolve to None (get_by_id) or are absent from the dict (get_many)
    - Read-only: the directory never writes
"""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mutual_aid.core.domain_types import UserId, UserProfile
from mutual_aid.models.user import User


def _to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=UserId(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
    )


class DatabaseUserDirectory:
    """UserDirectory implementation backed by the local users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return _to_profile(user) if user else None

    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UserId, UserProfile]:
        """Batch lookup — one query for a whole listing page."""
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        return {UserId(u.id): _to_profile(u) for u in result.scalars().all()}
