"""FastAPI dependencies for caller identity and upstream access."""

import secrets
from typing import AsyncGenerator, Optional

from fastapi import Header

from betdesk.config import get_settings
from betdesk.exceptions import UnauthenticatedError
from betdesk.services.sportsdata import SportsDataClient, create_sportsdata_client

ANONYMOUS = "anonymous"


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """Caller identity from the x-user-id header."""
    user_id = (x_user_id or "").strip()
    if not user_id or user_id.lower() == ANONYMOUS:
        raise UnauthenticatedError("Missing user identity", reason="missing_user_id")
    return user_id


async def require_admin(
    x_admin_token: Optional[str] = Header(default=None),
) -> None:
    """Shared-secret guard for admin routes. Open when no token is configured."""
    expected = get_settings().admin_token
    if not expected:
        return
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise UnauthenticatedError("Invalid admin token", reason="invalid_admin_token")


async def get_sportsdata_client() -> AsyncGenerator[SportsDataClient, None]:
    async with create_sportsdata_client() as client:
        yield client
