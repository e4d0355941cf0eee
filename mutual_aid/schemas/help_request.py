"""Help Request Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ArticleInput.description: 1-200 chars, stripped, non-empty
    - ArticleInput.quantity: 1-999
    - zip codes: 3-10 chars of letters, digits, space or dash, stripped
    - Article emptiness is NOT checked here: the service owns that rule so direct
      callers get the same ValidationError as HTTP clients
    - Unknown fields (e.g. a caller-supplied requesterId) are ignored

Design Decisions:
    - alias_generator=to_camel: JSON stays camelCase like the public API always was
    - Status strings normalized to lower case before enum validation ("Pending" works)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mutual_aid.core.domain_types import HelpRequestStatus
from mutual_aid.schemas.user import UserProfileResponse

_ZIP_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9 \-]{1,8}[A-Za-z0-9]$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleInput(_CamelModel):
    """One requested line item."""
    description: str = Field(min_length=1, max_length=200)
    quantity: int = Field(1, ge=1, le=999)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty or whitespace")
        return v


def _strip_zip(v: str | None) -> str | None:
    return v.strip() if isinstance(v, str) else v


class HelpRequestCreate(_CamelModel):
    """Help request creation payload."""
    zip_code: str = Field(pattern=_ZIP_PATTERN)
    articles: list[ArticleInput] = Field(default_factory=list)

    @field_validator("zip_code", mode="before")
    @classmethod
    def strip_zip_code(cls, v):
        return _strip_zip(v)


class HelpRequestUpdate(_CamelModel):
    """Partial update — only fields present are applied."""
    zip_code: str | None = Field(None, pattern=_ZIP_PATTERN)
    articles: list[ArticleInput] | None = None
    status: HelpRequestStatus | None = None

    @field_validator("zip_code", mode="before")
    @classmethod
    def strip_zip_code(cls, v):
        return _strip_zip(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class HelpRequestFilters(BaseModel):
    """Raw listing filters as received from the query string.

    user_id may be the "me" sentinel; statuses are unparsed strings. The
    service resolves both before building HelpRequestCriteria.
    """
    user_id: str | None = None
    zip_codes: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    include_requester: bool = False


class ArticleResponse(_CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    position: int
    description: str
    quantity: int


class HelpRequestResponse(_CamelModel):
    """Help request as returned to clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: UUID
    requester_id: UUID
    helper_id: UUID | None = None
    zip_code: str
    status: HelpRequestStatus
    articles: list[ArticleResponse]
    created_at: datetime
    updated_at: datetime
    requester: UserProfileResponse | None = None
