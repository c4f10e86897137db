"""Money helpers: two-place decimal rounding and a cents-backed column type."""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

CENT = Decimal("0.01")
# Largest unit price a product may carry: 2**31 - 1 cents
MAX_AMOUNT = Decimal("21474836.47")


def to_decimal(amount) -> Decimal:
    """Coerce ints, strings and floats to Decimal without binary float noise."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def round2(amount) -> Decimal:
    """Round to two places, halves away from zero (0.005 → 0.01)."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


class Money(TypeDecorator):
    """Stores a non-negative decimal amount as integer cents.

    Integer storage keeps SQLite and PostgreSQL in exact agreement; values are
    always read back as two-place Decimals.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(round2(value) * 100)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(value) / 100).quantize(CENT)
