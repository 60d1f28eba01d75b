# core/utils.py

"""
Repository for program-wide utilities.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal


def generate_uuid() -> str:
    return str(uuid.uuid4())


def round_half_up(value: float, places: int = 0) -> float:
    """
    Rounds a number to the given number of decimal places, with halves rounded away from zero.

    Python's built-in `round()` uses banker's rounding (62.5 -> 62), which would disagree with
    the percentages and grade point averages shown to students (62.5 -> 63).

    Args:
        value (float): The number to round.
        places (int): The number of decimal places to keep. Defaults to 0.

    Returns:
        The rounded value as a float.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return round_half_up(value, 2)
