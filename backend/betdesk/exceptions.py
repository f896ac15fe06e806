"""Error kinds surfaced by BetDesk services."""


class BetDeskError(Exception):
    """Base exception for BetDesk errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        self.reason = reason or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "reason": self.reason, "detail": self.message}


class UpstreamUnavailableError(BetDeskError):
    """Odds/results provider could not be reached or returned garbage."""

    kind = "upstream_unavailable"
    status_code = 502


class NotFoundError(BetDeskError):
    kind = "not_found"
    status_code = 404


class InvalidInputError(BetDeskError):
    kind = "invalid_input"
    status_code = 400


class ConflictError(BetDeskError):
    """Business rule violation (finished game, missing odds, low balance...)."""

    kind = "conflict"
    status_code = 409


class UnauthenticatedError(BetDeskError):
    kind = "unauthenticated"
    status_code = 401


class PersistenceError(BetDeskError):
    kind = "persistence_failure"
    status_code = 500
