"""Calendar normalization: display-ready, date-sorted milestone events."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from treasury.dates import long_date_label, long_month_label, parse_date, short_day_label, start_of_day
from treasury.models import CalendarEvent
from utils.formatting import truncate_middle
from utils.strings import optional_float, optional_str

DEFAULT_LABEL = "Treasury Milestone"
DEFAULT_VENDOR = "Cardano Project"
UPCOMING_LIMIT = 12


@dataclass(frozen=True)
class NormalizedEvent:
    id: str
    label: str
    date: datetime
    display_date: str
    amount_ada: Optional[float] = None
    vendor: Optional[str] = None
    pssc_addr: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "date": self.date.isoformat(),
            "display_date": self.display_date,
            "amount_ada": self.amount_ada,
            "vendor": self.vendor or DEFAULT_VENDOR,
            "pssc_addr": self.pssc_addr,
            "short_addr": truncate_middle(self.pssc_addr),
        }


def event_label(title: Optional[str]) -> str:
    # Upstream sometimes interpolates a missing vendor as the text "undefined".
    if not title or "undefined" in title:
        return DEFAULT_LABEL
    return title


def normalize_event(event: CalendarEvent) -> Optional[NormalizedEvent]:
    """Display form of one event, or ``None`` when its date does not parse."""
    dt = parse_date(event.date)
    if dt is None:
        return None
    props = event.extended_props or {}
    return NormalizedEvent(
        id=event.id,
        label=event_label(event.title),
        date=dt,
        display_date=long_date_label(dt),
        amount_ada=optional_float(props.get("amount_ada")),
        vendor=optional_str(props.get("vendor")),
        pssc_addr=optional_str(props.get("pssc_addr")),
    )


def normalize_events(events: Optional[Iterable[CalendarEvent]]) -> list[NormalizedEvent]:
    """Normalize, drop undated entries and sort ascending by date (stable)."""
    normalized = [normalize_event(event) for event in (events or ())]
    return sorted((event for event in normalized if event is not None),
                  key=lambda event: event.date)


def group_by_month(events: Iterable[NormalizedEvent]) -> list[tuple[str, list[NormalizedEvent]]]:
    """Stable group-by on ``"Month YYYY"`` in first-seen order."""
    groups: dict[str, list[NormalizedEvent]] = {}
    for event in events:
        groups.setdefault(long_month_label(event.date), []).append(event)
    return list(groups.items())


def upcoming(events: Sequence[NormalizedEvent], today: Optional[datetime] = None,
             limit: int = UPCOMING_LIMIT) -> list[NormalizedEvent]:
    """Events on or after the start of *today* (UTC), at most *limit*."""
    today = today or datetime.now(timezone.utc)
    if today.tzinfo is None:
        today = today.replace(tzinfo=timezone.utc)
    cutoff = start_of_day(today)
    return [event for event in events if event.date >= cutoff][:limit]


def format_date_range(events: Sequence[NormalizedEvent]) -> str:
    if not events:
        return "No upcoming"
    return f"{short_day_label(events[0].date)} – {short_day_label(events[-1].date)}"
