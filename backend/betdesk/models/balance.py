"""User balance database model."""

from sqlalchemy import Column, Integer, String

from betdesk.database.base import Base
from betdesk.models.base import MoneyType, TimestampMixin


class UserBalance(Base, TimestampMixin):
    """Play-money balance for one user."""

    __tablename__ = "user_balances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), unique=True, nullable=False, index=True)
    # Non-negativity is enforced by the guarded debit, not a constraint
    amount = Column(MoneyType, nullable=False)

    def __repr__(self) -> str:
        return f"<UserBalance {self.user_id} (${self.amount})>"
