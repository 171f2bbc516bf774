import math
from typing import Any


def parse_amount(value: Any) -> float:
    """Return a positive major-unit amount or raise ValueError("Invalid amount")."""
    if value is None or isinstance(value, bool) or value == "":
        raise ValueError("Invalid amount")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("Invalid amount") from None
    # minor-unit conversion multiplies by 100 and must stay finite
    if math.isnan(number) or math.isinf(number * 100) or number <= 0:
        raise ValueError("Invalid amount")
    return number


def to_minor_units(amount: float) -> int:
    # halves round up; builtin round() would round them to even
    return int(math.floor(amount * 100 + 0.5))


def ensure_non_negative_int(value: Any, field: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} must be a non-negative integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a non-negative integer") from None
    if number < 0 or (isinstance(value, float) and number != value):
        raise ValueError(f"{field} must be a non-negative integer")
    return number
