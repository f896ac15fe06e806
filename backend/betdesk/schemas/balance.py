"""Balance Pydantic schemas."""

from typing import Any

from betdesk.schemas.common import BaseSchema


class BalanceResponse(BaseSchema):
    user_id: str
    amount: float


class BalanceChangeRequest(BaseSchema):
    amount: Any = None
