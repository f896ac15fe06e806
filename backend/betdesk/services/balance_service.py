"""User balance ledger."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.config import get_settings
from betdesk.exceptions import ConflictError, InvalidInputError, PersistenceError
from betdesk.models import UserBalance
from betdesk.services.payout_calculator import MAX_AMOUNT, to_money

logger = logging.getLogger(__name__)


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """Validate a positive, finite currency amount."""
    if value is None or value == "":
        raise InvalidInputError(f"Missing {field}", reason="missing_field")
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number", reason="invalid_amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{field} must be a number", reason="invalid_amount")
    if not amount.is_finite() or amount <= 0:
        raise InvalidInputError(
            f"{field} must be a positive number", reason="invalid_amount"
        )
    if amount > MAX_AMOUNT:
        raise InvalidInputError(
            f"{field} must not exceed {MAX_AMOUNT}", reason="invalid_amount"
        )
    try:
        amount = to_money(amount)
    except InvalidOperation:
        raise InvalidInputError(f"{field} must be a number", reason="invalid_amount")
    if amount <= 0:
        raise InvalidInputError(
            f"{field} must be at least 0.01", reason="invalid_amount"
        )
    return amount


class BalanceService:
    """
    Atomic balance mutations.

    credit() and debit() issue a single UPDATE and leave the commit to the
    caller so they can share a transaction with a bet status change.
    """

    def __init__(self, starting_balance: Optional[Decimal] = None):
        self._starting_balance = starting_balance

    @property
    def starting_balance(self) -> Decimal:
        if self._starting_balance is not None:
            return to_money(self._starting_balance)
        return to_money(get_settings().betting.starting_balance)

    async def get_balance(self, db: AsyncSession, user_id: str) -> Optional[UserBalance]:
        result = await db.execute(
            select(UserBalance)
            .where(UserBalance.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_create_balance(self, db: AsyncSession, user_id: str) -> UserBalance:
        """Return the user's balance, creating it with the starting amount."""
        balance = await self.get_balance(db, user_id)
        if balance is not None:
            return balance

        db.add(UserBalance(user_id=user_id, amount=self.starting_balance))
        try:
            await db.commit()
        except IntegrityError:
            # Created concurrently by another request
            await db.rollback()
        else:
            logger.info(f"Created balance for {user_id}: ${self.starting_balance}")

        balance = await self.get_balance(db, user_id)
        if balance is None:
            raise PersistenceError(f"Could not create balance for {user_id}")
        return balance

    async def credit(self, db: AsyncSession, user_id: str, amount: Decimal) -> None:
        """Unconditionally add to a balance. Does not commit."""
        result = await db.execute(
            update(UserBalance)
            .where(UserBalance.user_id == user_id)
            .values(amount=UserBalance.amount + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise PersistenceError(f"No balance row to credit for {user_id}")

    async def credit_within_limit(self, db: AsyncSession, user_id: str, amount: Decimal) -> None:
        """Add to a balance only if the result still fits the column. Does not commit."""
        result = await db.execute(
            update(UserBalance)
            .where(UserBalance.user_id == user_id)
            .where(UserBalance.amount <= MAX_AMOUNT - amount)
            .values(amount=UserBalance.amount + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                f"Balance cannot exceed ${MAX_AMOUNT}",
                reason="balance_limit_exceeded",
            )

    async def debit(self, db: AsyncSession, user_id: str, amount: Decimal) -> None:
        """Subtract from a balance only if it covers the amount. Does not commit."""
        result = await db.execute(
            update(UserBalance)
            .where(UserBalance.user_id == user_id)
            .where(UserBalance.amount >= amount)
            .values(amount=UserBalance.amount - amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                f"Insufficient balance for ${amount}",
                reason="insufficient_balance",
            )

    async def add_funds(self, db: AsyncSession, user_id: str, amount: Any) -> UserBalance:
        value = parse_amount(amount)
        await self.get_or_create_balance(db, user_id)
        try:
            await self.credit_within_limit(db, user_id, value)
        except ConflictError:
            await db.rollback()
            raise
        await db.commit()
        logger.info(f"Added ${value} to {user_id}")
        return await self.get_balance(db, user_id)

    async def deduct_funds(self, db: AsyncSession, user_id: str, amount: Any) -> UserBalance:
        value = parse_amount(amount)
        await self.get_or_create_balance(db, user_id)
        try:
            await self.debit(db, user_id, value)
        except ConflictError:
            await db.rollback()
            raise
        await db.commit()
        logger.info(f"Deducted ${value} from {user_id}")
        return await self.get_balance(db, user_id)


# Singleton instance
balance_service = BalanceService()
