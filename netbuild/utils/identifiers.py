"""ID coercion and timestamp utilities."""

import math
import re
from datetime import datetime, timezone

# leading integer, the way parseInt reads "12abc" as 12; ASCII digits only
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def coerce_device_id(value: object, default: int = 0) -> int:
    """Read a device identifier from an untrusted value.

    Accepts ints, numeric strings ("7", " 7 ", "7-a") and finite floats,
    which are truncated toward zero (7.5 -> 7). Anything else (None, bools,
    non-finite floats, digit strings too long to convert, garbage) yields
    ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.trunc(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # over the interpreter's int/str conversion digit limit
                return default
    return default


def coerce_number(value: object, default: float = 0) -> float:
    """Return ``value`` as a float if it is a real number (not a bool).

    Anything else, including ints too large for a float, yields ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        return float(value)
    except OverflowError:
        return default


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
