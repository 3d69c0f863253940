"""
Normalization helpers for SiteBoss quoting.

Maps loosely-typed lead fields onto the closed categories used as
multiplier keys. Every helper is total: bad input falls back to a
documented default instead of raising.
"""

import math
from enum import Enum
from typing import Any


class Access(str, Enum):
    """Site access difficulty."""
    TIGHT = "tight"            # Machinery can't get in, hand work
    RESTRICTED = "restricted"  # Stairs, slopes, limited space
    EASY = "easy"


class Ground(str, Enum):
    """Ground conditions."""
    ROCKY = "rocky"
    SOFT = "soft"
    UNKNOWN = "unknown"


DEFAULT_HEIGHT = "1.8m"

MAX_BUDGET = 1e9
MAX_QTY = 1e6
MAX_JOB_TOTAL = 1e12

ACCESS_ALIASES = {
    "tight": Access.TIGHT,
    "restricted": Access.RESTRICTED,
    "limited": Access.RESTRICTED,
}

GROUND_ALIASES = {
    "rocky": Ground.ROCKY,
    "rock": Ground.ROCKY,
    "stone": Ground.ROCKY,
    "soft": Ground.SOFT,
    "sand": Ground.SOFT,
    "sandy": Ground.SOFT,
}


def _to_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip().lower()


def clamp_number(value: Any, minimum: float, maximum: float) -> float:
    """
    Coerce a value to a float inside [minimum, maximum].

    Anything that isn't a finite number (None, NaN, inf, junk strings)
    resolves to the lower bound.
    """
    if isinstance(value, bool):
        value = int(value)
    try:
        number = float(value)
    except OverflowError:
        # Integer too large for a float
        return maximum if value > 0 else minimum
    except (TypeError, ValueError):
        return minimum
    if not math.isfinite(number):
        return minimum
    return min(max(number, minimum), maximum)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, .5 going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def round10(value: float) -> int:
    """Round to the nearest multiple of 10 (half away from zero)."""
    return round_half_away(value / 10) * 10


def normalize_access(access: Any) -> Access:
    return ACCESS_ALIASES.get(_to_text(access), Access.EASY)


def normalize_ground(ground: Any) -> Ground:
    return GROUND_ALIASES.get(_to_text(ground), Ground.UNKNOWN)


def normalize_height(height: Any) -> str:
    """
    Normalize a height into a metre tag such as "1.8m".

    Tags already ending in "m" are kept as-is. Bare numbers are read as
    metres, or millimetres when above 100 ("1800" -> "1.8m").
    """
    text = _to_text(height)
    if not text:
        return DEFAULT_HEIGHT
    if text.endswith("m"):
        return text
    try:
        number = float(text)
    except ValueError:
        return DEFAULT_HEIGHT
    if not math.isfinite(number):
        return DEFAULT_HEIGHT
    if number > 100:
        number = number / 1000
    return f"{number:.1f}m"
