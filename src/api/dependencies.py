"""FastAPI dependencies for authentication and shared resources."""

from datetime import tzinfo

from fastapi import Depends, Header, HTTPException, Query, status

from api.models.responses import ErrorCodes
from core.backend_client import BackendClient, get_http_client
from core.calendar_grid import resolve_timezone
from core.config import DISPLAY_TIMEZONE


async def require_access_token(authorization: str | None = Header(None)) -> str:
    """
    Extract the caller's bearer token from the Authorization header.

    The token is forwarded to the backend as-is; the backend decides whether
    it is valid.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer token
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Missing or invalid bearer token",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )
    return token.strip()


async def get_backend(token: str = Depends(require_access_token)) -> BackendClient:
    """Backend client acting on behalf of the caller."""
    return BackendClient(get_http_client(), token)


def get_display_timezone(tz: str | None = Query(None, description="IANA timezone name")) -> tzinfo:
    """Display timezone from ?tz=, falling back to DISPLAY_TIMEZONE."""
    return resolve_timezone(tz or DISPLAY_TIMEZONE)
