"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - External collaborators (user directory) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass a plain fake
    - Async in Protocol: implementations do IO
"""

from typing import Iterable, Protocol

from mutual_aid.core.domain_types import UserId, UserProfile


class UserDirectory(Protocol):
    """Contract for profile lookup — implemented by services/user_directory.py."""
    async def get_by_id(self, user_id: UserId) -> UserProfile | None: ...
    async def get_many(
        self, user_ids: Iterable[UserId],
    ) -> dict[UserId, UserProfile]: ...
