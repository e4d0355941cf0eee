"""Service Wiring — FastAPI dependencies that assemble services per request.

Invariants:
    - One AsyncSession per request, shared by store and directory
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mutual_aid.config import get_settings
from mutual_aid.infrastructure.database import get_db
from mutual_aid.services.help_request_service import HelpRequestService
from mutual_aid.services.help_request_store import HelpRequestStore
from mutual_aid.services.user_directory import DatabaseUserDirectory


async def get_help_request_service(
    db: AsyncSession = Depends(get_db),
) -> HelpRequestService:
    settings = get_settings()
    return HelpRequestService(
        HelpRequestStore(db, max_update_attempts=settings.store_update_max_attempts),
        DatabaseUserDirectory(db),
    )
