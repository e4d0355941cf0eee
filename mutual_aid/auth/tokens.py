"""Bearer Tokens — HS256 JWT issuance and verification.

Invariants:
    - The `sub` claim carries the user id as a UUID string
    - Every token expires (`exp` claim); expired tokens are rejected
    - Verification failures raise AuthError, never return a partial principal
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt, JWTError, ExpiredSignatureError

from mutual_aid.auth.models import Principal
from mutual_aid.config import get_settings
from mutual_aid.core.errors import AuthError

logger = logging.getLogger(__name__)


def issue_token(principal: Principal, expires_minutes: int | None = None) -> str:
    """Sign an access token for the principal."""
    settings = get_settings()
    lifetime = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(principal.user_id),
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Principal:
    """Verify signature and expiry, return the principal or raise AuthError."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        logger.warning("Bearer token has expired")
        raise AuthError("Token has expired")
    except JWTError as e:
        logger.warning(f"Bearer token validation failed: {e}")
        raise AuthError("Invalid token")

    subject = payload.get("sub")
    if not subject:
        logger.warning("Bearer token missing 'sub' claim")
        raise AuthError("Invalid token: missing user id")
    try:
        return Principal(user_id=UUID(subject))
    except ValueError:
        logger.warning(f"Malformed user id in token: {subject}")
        raise AuthError("Invalid token: malformed user id")
