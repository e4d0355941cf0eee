"""Help Request Routes — transport binding for list/create/get/update.

Invariants:
    - Every route requires a verified Principal (router-level dependency)
    - Routes only parse, delegate and serialize; rules live in the service and core
    - Single reads always carry the requester profile; listings only on includeRequester

Design Decisions:
    - Repeated query params for sets (?zipCode=a&zipCode=b), as clients already send them
    - Responses built with HelpRequestResponse.model_validate: ORM rows never leak
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from mutual_aid.api.dependencies import get_help_request_service
from mutual_aid.auth.dependencies import get_current_principal
from mutual_aid.auth.models import Principal
from mutual_aid.core.domain_types import HelpRequestId, UserId
from mutual_aid.core.errors import ErrorContext, ResourceNotFoundError
from mutual_aid.schemas.help_request import (
    HelpRequestCreate, HelpRequestFilters, HelpRequestResponse, HelpRequestUpdate,
)
from mutual_aid.services.help_request_service import HelpRequestService

router = APIRouter(
    prefix="/help-requests",
    tags=["help-requests"],
    dependencies=[Depends(get_current_principal)],
)


@router.get("", response_model=list[HelpRequestResponse])
async def list_help_requests(
    user_id: str | None = Query(
        None, alias="userId",
        description='Filter by requester id, "me" for the calling user; omit for all users',
    ),
    zip_code: list[str] | None = Query(
        None, alias="zipCode", description="Filter by one or more zip codes",
    ),
    status_filter: list[str] | None = Query(
        None, alias="status", description="Filter by one or more statuses",
    ),
    include_requester: bool = Query(
        False, alias="includeRequester",
        description="Include the requester profile in each help request",
    ),
    principal: Principal = Depends(get_current_principal),
    service: HelpRequestService = Depends(get_help_request_service),
):
    """Get and filter help requests."""
    filters = HelpRequestFilters(
        user_id=user_id,
        zip_codes=zip_code or [],
        statuses=status_filter or [],
        include_requester=include_requester,
    )
    records = await service.get_all(filters, principal)
    return [HelpRequestResponse.model_validate(r) for r in records]


@router.post(
    "", response_model=HelpRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_help_request(
    body: HelpRequestCreate,
    principal: Principal = Depends(get_current_principal),
    service: HelpRequestService = Depends(get_help_request_service),
):
    """Add a complete help request including articles."""
    record = await service.create(body, UserId(principal.user_id))
    return HelpRequestResponse.model_validate(record)


@router.get("/{help_request_id}", response_model=HelpRequestResponse)
async def get_help_request(
    help_request_id: UUID,
    service: HelpRequestService = Depends(get_help_request_service),
):
    """Get a single help request with its requester profile."""
    record = await service.get(HelpRequestId(help_request_id))
    if record is None:
        raise ResourceNotFoundError(
            "HelpRequest", str(help_request_id),
            ErrorContext(help_request_id=str(help_request_id)),
        )
    await service.attach_requester(record)
    return HelpRequestResponse.model_validate(record)


@router.put("/{help_request_id}", response_model=HelpRequestResponse)
async def update_help_request(
    help_request_id: UUID,
    body: HelpRequestUpdate,
    principal: Principal = Depends(get_current_principal),
    service: HelpRequestService = Depends(get_help_request_service),
):
    """Modify a help request (zip code, articles or status)."""
    record = await service.update(HelpRequestId(help_request_id), body, principal)
    return HelpRequestResponse.model_validate(record)
