"""Output formatting utilities for treasury figures.

Provides reusable functions for:
- Formatting ADA amounts in compact notation
- Percentages and counts
- Shortening long on-chain identifiers for display
"""

import math
from typing import Optional

ADA_SYMBOL = "₳"
PLACEHOLDER = "—"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_ada(value: Optional[float]) -> str:
    """Format an ADA amount for headline display.

    Args:
        value: Amount in ADA (can be None)

    Returns:
        Formatted string like "1.23B ₳", "4.50M ₳", "45.2K ₳" or "999 ₳"

    Examples:
        format_ada(1_234_567_890) -> "1.23B ₳"
        format_ada(45_200) -> "45.2K ₳"
        format_ada(999) -> "999 ₳"
        format_ada(None) -> "—"
    """
    if value is None or not math.isfinite(value):
        return PLACEHOLDER
    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B {ADA_SYMBOL}"
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M {ADA_SYMBOL}"
    if value >= 10_000:
        return f"{value / 1_000:.1f}K {ADA_SYMBOL}"
    return f"{_round_half_up(value):,} {ADA_SYMBOL}"


def format_ada_compact(value: Optional[float]) -> str:
    """Format an ADA amount for contract lists (one decimal place).

    Zero is treated like a missing value and rendered as a placeholder.

    Examples:
        format_ada_compact(2_500_000) -> "2.5M ₳"
        format_ada_compact(0) -> "—"
    """
    if not value or math.isnan(value):
        return PLACEHOLDER
    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B {ADA_SYMBOL}"
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M {ADA_SYMBOL}"
    if value >= 10_000:
        return f"{value / 1_000:.1f}K {ADA_SYMBOL}"
    return f"{_round_half_up(value):,} {ADA_SYMBOL}"


def format_percent(value: Optional[float], precision: int = 1) -> str:
    """Format a percentage for display.

    Args:
        value: Percentage value (0.0 to 100.0)
        precision: Decimal places (default: 1)

    Returns:
        Formatted string like "42.5%"

    Examples:
        format_percent(42.5) -> "42.5%"
        format_percent(None) -> "—"
    """
    if value is None or not math.isfinite(value):
        return PLACEHOLDER
    return f"{value:.{precision}f}%"


def format_count(value: Optional[int]) -> str:
    """Format a count with thousands separator.

    Examples:
        format_count(1234567) -> "1,234,567"
        format_count(None) -> "—"
    """
    if value is None:
        return PLACEHOLDER
    return f"{int(value):,d}"


def truncate_middle(text: Optional[str], head: int = 8, tail: int = 6) -> str:
    """Shorten a long identifier to ``head…tail``.

    Examples:
        truncate_middle("addr1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh") -> "addr1qxy…hx0wlh"
        truncate_middle(None) -> "—"
    """
    if not text:
        return PLACEHOLDER
    if len(text) <= head + tail:
        return text
    return f"{text[:head]}…{text[-tail:]}"
