"""Price arithmetic for order lines and order totals.

All amounts are ``Decimal`` and every result is rounded half-up to cents.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from ..common.errors import InvalidRequest

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)


def to_money(value: Number) -> Decimal:
    # str() first so floats like 49.99 keep their written value
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _percent(value: Optional[Number], what: str) -> Decimal:
    pct = Decimal(str(value or 0))
    if pct < 0 or pct > HUNDRED:
        raise InvalidRequest(f"{what} must be between 0 and 100")
    return pct


def compute_line_price(unit_price: Number, quantity: int, discount_percent: Optional[Number] = None) -> Decimal:
    """Price of one order line; a discount of 0 is the same as no discount."""
    if quantity < 0:
        raise InvalidRequest("Quantity cannot be negative")
    unit = Decimal(str(unit_price))
    pct = _percent(discount_percent, "Discount")
    if pct:
        return to_money((unit - unit * pct / HUNDRED) * quantity)
    return to_money(unit * quantity)


def compute_order_total(
    prices: Iterable[Number],
    shipping: Number,
    general_discount: Optional[Number] = None,
) -> Decimal:
    subtotal = sum((Decimal(str(p)) for p in prices), Decimal(0))
    factor = 1 - _percent(general_discount, "General discount") / HUNDRED
    return to_money(subtotal * factor + Decimal(str(shipping)))
