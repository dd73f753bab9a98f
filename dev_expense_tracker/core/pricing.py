"""
Cost normalization.

Converts costs entered per billing cycle into monthly terms.
"""

import math
from typing import Optional, Union


def parse_cost(raw_cost: Union[str, int, float, None]) -> Optional[float]:
    """Parse a user-entered cost.

    Accepts numbers or numeric strings (surrounding whitespace ignored).
    Strings with trailing text such as "20$" are rejected.

    Returns:
        The cost as a float, or None if it is not a finite number > 0
    """
    if raw_cost is None or isinstance(raw_cost, bool):
        return None
    if isinstance(raw_cost, str):
        raw_cost = raw_cost.strip()
        if not raw_cost:
            return None
    try:
        cost = float(raw_cost)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(cost) or cost <= 0:
        return None
    return cost


def round_cents(amount: float) -> float:
    """Round to 2 decimal places, halves rounding up.

    Works on the binary float value, so 1.005 (stored as 1.00499...)
    becomes 1.0 while 0.125 becomes 0.13.
    """
    scaled = amount * 100
    if not math.isfinite(scaled):
        # beyond float cent precision already
        return amount
    return math.floor(scaled + 0.5) / 100


def monthly_cost(original_cost: float, months_per_cycle: int) -> float:
    """Normalize a per-cycle cost to a monthly cost.

    20 per year becomes 1.67 per month.

    Args:
        original_cost: Cost as entered for one billing cycle
        months_per_cycle: Number of months covered by one cycle

    Returns:
        Monthly cost rounded to 2 decimal places
    """
    return round_cents(original_cost / months_per_cycle)
