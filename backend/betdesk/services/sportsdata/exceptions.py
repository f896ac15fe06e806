from betdesk.exceptions import UpstreamUnavailableError


class SportsDataAPIError(UpstreamUnavailableError):
    """Base exception for SportsData API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, reason="sportsdata_error")
        self.upstream_status = status_code


class SportsDataAuthError(SportsDataAPIError):
    """API key rejected."""

    pass


class SportsDataPayloadError(SportsDataAPIError):
    """Response body was not the expected JSON array."""

    pass
