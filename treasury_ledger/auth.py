"""
Admin bearer-token guard.

Tokens are issued by the site's session layer; this service only
verifies them. A token must carry a subject, and its role must be
one of ADMIN_ROLES.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from treasury_ledger.config import get_settings
from treasury_ledger.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=1)


def create_access_token(
    data: dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Mint a signed token. Used by tooling and tests."""
    settings = get_settings()
    to_encode = data.copy()
    to_encode["exp"] = datetime.utcnow() + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    return jwt.encode(
        to_encode, settings.AUTH_SECRET, algorithm=settings.AUTH_ALGORITHM
    )


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """Return the claims, or None if the token is invalid or expired."""
    settings = get_settings()
    try:
        return jwt.decode(
            token, settings.AUTH_SECRET, algorithms=[settings.AUTH_ALGORITHM]
        )
    except JWTError as e:
        logger.warning("Token verification failed: %s", e)
        return None


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict[str, Any]:
    """
    FastAPI dependency for every business endpoint.

    Unauthorized (401) when the token is missing, invalid or has no
    subject; Forbidden (403) when the caller is not an admin.
    """
    if credentials is None:
        logger.warning("Rejected request without bearer token")
        raise Unauthorized("Authentication required")

    claims = decode_access_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        raise Unauthorized("Authentication required")

    if claims.get("role") not in get_settings().ADMIN_ROLES:
        logger.warning(
            "Rejected non-admin %s with role %s", claims["sub"], claims.get("role")
        )
        raise Forbidden("Admin access required")

    return claims
