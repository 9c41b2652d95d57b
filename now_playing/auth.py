"""Bearer token check for privileged endpoints."""

import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our 401, not FastAPI's 403
security_scheme = HTTPBearer(auto_error=False)


class APIAuthError(HTTPException):
    """Exception raised when API authentication fails."""

    def __init__(self, detail: str = "Invalid or missing API token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def check_api_token(provided: Optional[str], expected: Optional[str]) -> None:
    """Validate a bearer token against the configured API token.

    Raises:
        HTTPException: 403 when no token is configured (privileged
            endpoints are disabled), APIAuthError when the token is missing
            or wrong.
    """
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Privileged endpoints are disabled (no API token configured)",
        )

    if not provided:
        raise APIAuthError("Missing Authorization header")

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(provided, expected):
        raise APIAuthError("Invalid API token")


def require_api_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security_scheme),
) -> bool:
    """FastAPI dependency guarding privileged endpoints.

    The expected token is read from ``app.state.service_settings``.
    """
    expected = request.app.state.service_settings.api_token
    provided = credentials.credentials if credentials else None

    try:
        check_api_token(provided, expected)
    except HTTPException:
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected privileged request from {client}")
        raise

    return True
