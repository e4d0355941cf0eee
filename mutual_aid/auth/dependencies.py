"""FastAPI Auth Dependencies — resolve the Principal before any route logic runs.

Invariants:
    - Missing, malformed or expired tokens raise AuthError (401) via the global handler
    - Route handlers never see an unauthenticated request
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mutual_aid.auth.models import Principal
from mutual_aid.auth.tokens import decode_token
from mutual_aid.core.errors import AuthError

# auto_error=False: missing credentials go through AuthError for a uniform 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Extract and verify the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthError()
    return decode_token(credentials.credentials)
