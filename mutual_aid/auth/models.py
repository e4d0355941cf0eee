"""Principal — the authenticated caller attached to each request."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Principal(BaseModel):
    """Verified caller identity decoded from the bearer token.

    Minimal on purpose: the core only needs the user id. Profile data comes
    from the user directory.
    """
    model_config = ConfigDict(frozen=True)

    user_id: UUID
