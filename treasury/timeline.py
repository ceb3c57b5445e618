"""Monthly incoming/outgoing series for the funding timeline.

Outgoing flows are dated by each child link's ``fund_date``.  Incoming
treasury allocations carry no date upstream, so a TRSC's whole
``incoming_to_trsc`` is booked in the month of its *first* child's funding
date.  That proxy is an approximation of when the allocation arrived.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable

from treasury.dates import month_key, parse_date, short_month_label
from treasury.models import RoutingContract


@dataclass
class MonthBucket:
    month: str            # "YYYY-MM", UTC
    display_month: str    # "Mar 2024"
    incoming: float = 0.0
    outgoing: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "display_month": self.display_month,
            "incoming": self.incoming,
            "outgoing": self.outgoing,
        }


def bucket_timeline(trsc: Iterable[RoutingContract]) -> list[MonthBucket]:
    """Fold dated funding events into per-month totals, oldest first.

    Children whose date does not parse are skipped entirely.
    """
    buckets: dict[str, MonthBucket] = {}

    def bucket_for(dt) -> MonthBucket:
        key = month_key(dt)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthBucket(key, short_month_label(dt))
        return bucket

    for contract in trsc:
        for child in contract.children:
            dt = parse_date(child.fund_date)
            if dt is None:
                continue
            bucket_for(dt).outgoing += child.outgoing_amount

        incoming = contract.incoming_to_trsc
        if incoming and math.isfinite(incoming) and contract.children:
            dt = parse_date(contract.children[0].fund_date)
            if dt is not None:
                bucket_for(dt).incoming += incoming

    return sorted(buckets.values(), key=lambda bucket: bucket.month)
