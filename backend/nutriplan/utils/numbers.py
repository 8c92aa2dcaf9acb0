import math


def round_half_up(value: float) -> int:
    """0.5 always rounds up (66.5 -> 67), unlike round()'s banker's rounding."""
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
