import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from devevent.core.config import settings

logger = logging.getLogger(__name__)


def require_api_token(authorization: Optional[str] = Header(default=None)) -> None:
    """Allow the request only with ``Authorization: Bearer <API_AUTH_TOKEN>``."""
    if not settings.api_auth_token:
        logger.error("API_AUTH_TOKEN is not set. Authentication is misconfigured.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server authentication is not configured.",
        )

    if not authorization:
        logger.warning("Unauthenticated request: missing Authorization header.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Provide a Bearer token in the Authorization header.",
        )

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        logger.warning("Unauthenticated request: invalid Authorization header format.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Use 'Authorization: Bearer <token>'.",
        )

    if not secrets.compare_digest(token.encode(), settings.api_auth_token.encode()):
        logger.warning("Unauthorized request: invalid token.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid authentication token.",
        )
