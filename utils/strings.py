"""String and number coercion utilities.

Upstream payloads occasionally carry amounts as strings ("1,250 ₳") or omit
them entirely; these helpers turn such values into floats without raising.
"""

import math
import re

CURRENCY_SYMBOLS = re.compile(r"[$€£₳]|\bADA\b", re.IGNORECASE)


def safe_float(val, default: float = 0.0) -> float:
    """Safely convert value to float with fallback default.

    Handles:
    - None, empty strings -> default
    - Numeric types -> float (bools are rejected)
    - Strings with currency symbols, whitespace, commas
    - Invalid input -> default

    Args:
        val: Value to convert (any type)
        default: Value to return on failure (default: 0.0)

    Returns:
        float: Parsed value or default
    """
    parsed = optional_float(val)
    return default if parsed is None else parsed


def optional_float(val) -> float | None:
    """Like :func:`safe_float` but returns ``None`` for absent/invalid input.

    Keeping "absent" distinct from zero matters wherever a fallback chain
    picks the first present amount (budget, then balance, ...).
    """
    if val is None or val == '' or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val)

    try:
        s = CURRENCY_SYMBOLS.sub('', str(val))
        s = s.replace(',', '').strip()
        return float(s) if s else None
    except (ValueError, TypeError):
        return None


def optional_int(val) -> int | None:
    """Coerce to int, truncating floats; ``None`` for absent/invalid input."""
    parsed = optional_float(val)
    if parsed is None or not math.isfinite(parsed):
        return None
    return int(parsed)


def optional_str(val) -> str | None:
    """Return ``str(val)`` or ``None`` when the value is absent."""
    if val is None:
        return None
    return val if isinstance(val, str) else str(val)
