# parsing.py

"""Parsing of the unit-suffixed size and count strings emitted by the probe."""

import logging
import math
from typing import Any, NamedTuple

from .config import BASE_UNIT, SIZE_UNITS
from .exceptions import ParseError

logger = logging.getLogger(__name__)

class SizeQuantity(NamedTuple):
    """A memory figure normalized to the base unit (KiB)."""
    kib: float
    unit: str = BASE_UNIT
    raw: str = ""

    def __str__(self) -> str:
        return self.raw or f"{self.kib:g} {BASE_UNIT}"

def parse_size(raw: Any) -> SizeQuantity:
    """
    Parse a size string such as "65536 KiB" or "2048 KB" into KiB.

    The string is split at the first whitespace run and the leading token is
    read as the magnitude. Unknown unit tokens are passed through with the
    base-unit assumption; a bad magnitude raises ParseError.

    Args:
        raw: Size string from the probe, or a bare number already in KiB

    Returns:
        SizeQuantity holding the normalized magnitude
    """
    if isinstance(raw, bool):
        raise ParseError(f"Invalid size value: {raw!r}")
    if isinstance(raw, (int, float)):
        magnitude = float(raw)
        if not math.isfinite(magnitude) or magnitude < 0:
            raise ParseError(f"Invalid size magnitude: {raw!r}")
        return SizeQuantity(kib=magnitude, unit=BASE_UNIT, raw=str(raw))
    if not isinstance(raw, str):
        raise ParseError(f"Invalid size value: {raw!r}")

    parts = raw.strip().split(None, 1)
    if not parts:
        raise ParseError("Size string has no magnitude")

    token = parts[0]
    try:
        magnitude = float(token)
    except ValueError:
        raise ParseError(f"Size magnitude {token!r} in {raw!r} is not numeric")
    if not math.isfinite(magnitude) or magnitude < 0:
        raise ParseError(f"Size magnitude {token!r} in {raw!r} is out of range")

    unit = parts[1].strip() if len(parts) > 1 else ""
    multiplier = SIZE_UNITS.get(unit.lower())
    if multiplier is None:
        if unit:
            logger.debug(f"Unrecognized unit {unit!r} in {raw!r}, assuming {BASE_UNIT}")
        multiplier = 1.0

    kib = magnitude * multiplier
    if not math.isfinite(kib):
        raise ParseError(f"Size {raw!r} is too large")

    return SizeQuantity(kib=kib, unit=unit or BASE_UNIT, raw=raw.strip())

def parse_count(raw: Any) -> int:
    """Parse a non-negative integer count such as a CPU(s) field."""
    if isinstance(raw, bool):
        raise ParseError(f"Invalid count: {raw!r}")
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            raise ParseError(f"Count {raw!r} is not an integer")
    if value < 0:
        raise ParseError(f"Count {raw!r} is negative")
    return value
