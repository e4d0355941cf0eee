"""User Schemas — public profile attached to help request reads."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserProfileResponse(BaseModel):
    """Requester profile as shown to other users."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
