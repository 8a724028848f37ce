"""
Utility functions for the application.
"""
from typing import Any, Iterable
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
# largest value a Numeric(12, 2) column holds
MAX_MONEY = Decimal("9999999999.99")


def to_money(value: Any) -> Decimal:
    """Convert a driver value (Decimal, int, float, str or None) to a cent-quantized Decimal."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        # str() first so binary floats from SUM() over REAL columns do not leak digits
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Any]) -> Decimal:
    """Exact decimal sum of monetary values."""
    total = Decimal("0")
    for value in values:
        total += to_money(value)
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def serialize_date(obj: Any) -> str:
    """Serialize date objects to ISO format strings."""
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")
