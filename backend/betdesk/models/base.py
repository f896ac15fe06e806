"""Shared column types and mixins for the models."""

from sqlalchemy import BigInteger, Column, DateTime, Integer, Numeric
from sqlalchemy.sql import func

# Provider game ids are 64-bit; SQLite only treats INTEGER as a rowid alias
GameIdType = BigInteger().with_variant(Integer, "sqlite")

# Dollars and cents
MoneyType = Numeric(12, 2)


class TimestampMixin:
    """Database-maintained created_at / updated_at."""

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
