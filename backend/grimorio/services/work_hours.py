from datetime import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

TWO_PLACES = Decimal("0.01")


def _minutes_of(value: time) -> Decimal:
    return Decimal(value.hour * 60 + value.minute) + Decimal(value.second) / Decimal(60)


def calculate_worked_hours(
    start_time: time,
    end_time: time,
    break_minutes: Optional[int] = None,
    lunch_minutes: Optional[int] = None
) -> Decimal:
    """
    Net hours of a shift: (end - start) - break - lunch, never negative.

    Shifts do not wrap past midnight; an end before the start gives 0.
    """
    total_minutes = _minutes_of(end_time) - _minutes_of(start_time)
    total_minutes -= Decimal(break_minutes or 0)
    total_minutes -= Decimal(lunch_minutes or 0)
    if total_minutes <= 0:
        return Decimal("0.00")
    return (total_minutes / Decimal(60)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_hours_float(value: Decimal) -> float:
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
