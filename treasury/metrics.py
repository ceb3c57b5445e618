"""Headline stat cards for the overview page."""

from typing import Any, Optional

from treasury.models import TreasuryStats
from utils.formatting import PLACEHOLDER, format_ada, format_count, format_percent

TONE_POSITIVE = "positive"
TONE_NEUTRAL = "neutral"


def _card(title: str, value: str, change: Optional[str] = None,
          change_tone: Optional[str] = None, change_label: Optional[str] = None) -> dict[str, Any]:
    return {
        "title": title,
        "value": value,
        "change": change,
        "change_tone": change_tone,
        "change_label": change_label,
    }


def allocated_share(stats: TreasuryStats) -> Optional[float]:
    """Percent of the annual budget routed to TRSC; ``None`` without a budget."""
    if not stats.annual_budget:
        return None
    return stats.allocated_to_trsc_ada / stats.annual_budget * 100


def stat_cards(stats: Optional[TreasuryStats]) -> list[dict[str, Any]]:
    """The four overview cards; placeholders when stats are not loaded."""
    if stats is None:
        return [
            _card("Treasury Balance", PLACEHOLDER),
            _card("Allocated", PLACEHOLDER),
            _card("Vendors Active", PLACEHOLDER),
            _card("Claimed %", PLACEHOLDER),
        ]

    return [
        _card("Treasury Balance", format_ada(stats.treasury_balance_ada),
              format_ada(stats.remaining_treasury_ada), TONE_POSITIVE, "Remaining"),
        _card("Allocated to TRSC", format_ada(stats.allocated_to_trsc_ada),
              format_percent(allocated_share(stats)), TONE_NEUTRAL, "of annual budget"),
        _card("Active PSSC", format_count(stats.pssc_count),
              f"{stats.trsc_count} TRSC nodes", TONE_NEUTRAL, "routing contracts"),
        _card("Claimed by Vendors", format_ada(stats.claimed_by_vendors_ada),
              format_percent(stats.budget_claimed_percentage), TONE_POSITIVE, "of allocated"),
    ]
