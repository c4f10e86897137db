"""Pricing calculator — subtotal, flat-rate tax and total for a set of lines.

Pure functions over Decimal; no storage access. All three amounts are rounded
to two places with ROUND_HALF_UP, and ``total == subtotal + tax`` always holds.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from shared.money import round2, to_decimal

TAX_RATE = Decimal("0.07")


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}


def line_total(unit_price, quantity: int) -> Decimal:
    return round2(to_decimal(unit_price) * quantity)


def price(lines: Iterable[tuple]) -> PriceQuote:
    """Price `(unit_price, quantity)` pairs.

    >>> price([(Decimal("10.00"), 2), (Decimal("5.00"), 3)])
    PriceQuote(subtotal=Decimal('35.00'), tax=Decimal('2.45'), total=Decimal('37.45'))
    """
    subtotal = round2(sum((to_decimal(unit_price) * quantity for unit_price, quantity in lines), Decimal("0")))
    tax = round2(subtotal * TAX_RATE)
    return PriceQuote(subtotal=subtotal, tax=tax, total=round2(subtotal + tax))
