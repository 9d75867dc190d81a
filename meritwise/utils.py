import math
from typing import List, Optional

def average(nums: List[Optional[float]]) -> Optional[float]:
    vals = [x for x in nums if isinstance(x, (int, float))]
    if not vals:
        return None
    return sum(vals) / len(vals)

def round_half_up(x: float) -> int:
    """Nearest integer, halves rounded toward +inf (not banker's rounding)."""
    return int(math.floor(x + 0.5))

def round2(x: float) -> float:
    return round(x, 2)

def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))

def ordinal(n: int) -> str:
    suffixes = ["th", "st", "nd", "rd"]
    v = n % 100
    if 11 <= v <= 13:
        return f"{n}th"
    return f"{n}{suffixes[n % 10] if n % 10 < 4 else 'th'}"
