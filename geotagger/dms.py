"""Degrees/minutes/seconds codec for EXIF GPS rationals."""
import math
from typing import Optional, Sequence, Tuple

Rational = Tuple[int, int]
DmsTriple = Tuple[Rational, Rational, Rational]

# seconds are stored in thousandths
SECONDS_DENOMINATOR = 1000

_NEGATIVE_REFS = ("S", "W")


def encode(decimal: float) -> DmsTriple:
    """Convert a non-negative decimal degree value to a rational DMS triple.

    Pass ``abs(value)``; the sign travels separately as a hemisphere ref.
    """
    degrees = math.floor(decimal)
    minutes_float = (decimal - degrees) * 60.0
    minutes = math.floor(minutes_float)
    seconds_float = (minutes_float - minutes) * 60.0
    # round half up, not to even
    seconds = int(math.floor(seconds_float * SECONDS_DENOMINATOR + 0.5))
    return (
        (int(degrees), 1),
        (int(minutes), 1),
        (seconds, SECONDS_DENOMINATOR),
    )


def _to_float(value) -> float:
    num, den = value
    return float(num) / float(den) if den else float(num)


def decode(dms: Sequence[Rational], ref: Optional[str]) -> float:
    """Rebuild a signed decimal from ``(deg, min, sec)`` rationals and a ref."""
    deg = _to_float(dms[0])
    minute = _to_float(dms[1])
    sec = _to_float(dms[2])
    dec = deg + (minute / 60.0) + (sec / 3600.0)
    if ref and ref.strip().upper() in _NEGATIVE_REFS:
        dec = -dec
    return dec


def latitude_ref(latitude: float) -> str:
    return "N" if latitude >= 0 else "S"


def longitude_ref(longitude: float) -> str:
    return "E" if longitude >= 0 else "W"
