from .client import SportsDataClient, create_sportsdata_client
from .exceptions import (
    SportsDataAPIError,
    SportsDataAuthError,
    SportsDataPayloadError,
)
from .models import OddsLine, UpstreamGame, is_final_status

__all__ = [
    "SportsDataClient",
    "create_sportsdata_client",
    "SportsDataAPIError",
    "SportsDataAuthError",
    "SportsDataPayloadError",
    "OddsLine",
    "UpstreamGame",
    "is_final_status",
]
