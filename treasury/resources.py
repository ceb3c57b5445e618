"""The four upstream resources and their refresh/caching policy.

Each resource is fetched from ``<base_url><path>``, revalidated by the
periodic cache every ``refresh_seconds``, and re-served by the pass-through
API with ``Cache-Control: s-maxage=..., stale-while-revalidate=...``.
"""

from dataclasses import dataclass
from typing import Any, Callable

from treasury.models import CalendarEvent, DataVersion, TreasuryData, TreasuryStats
from utils.cache import CachedResource, PeriodicCache

TREASURY_DATA = "treasury-data"
TREASURY_STATS = "treasury-stats"
CALENDAR_EVENTS = "calendar-events"
DATA_VERSION = "data-version"


@dataclass(frozen=True)
class ResourceSpec:
    name: str
    path: str
    description: str
    refresh_seconds: float
    s_maxage: int
    stale_while_revalidate: int
    parse: Callable[[Any], Any]

    @property
    def cache_control(self) -> str:
        return f"s-maxage={self.s_maxage}, stale-while-revalidate={self.stale_while_revalidate}"

    @property
    def error_message(self) -> str:
        return f"Unable to load {self.description}"


RESOURCES: dict[str, ResourceSpec] = {
    spec.name: spec
    for spec in (
        ResourceSpec(TREASURY_DATA, "/treasury-data", "treasury data",
                     refresh_seconds=5 * 60, s_maxage=300, stale_while_revalidate=600,
                     parse=TreasuryData.from_dict),
        ResourceSpec(TREASURY_STATS, "/treasury-stats", "treasury stats",
                     refresh_seconds=5 * 60, s_maxage=300, stale_while_revalidate=600,
                     parse=TreasuryStats.from_dict),
        ResourceSpec(CALENDAR_EVENTS, "/calendar-events", "calendar events",
                     refresh_seconds=10 * 60, s_maxage=600, stale_while_revalidate=900,
                     parse=CalendarEvent.list_from_json),
        ResourceSpec(DATA_VERSION, "/data-version", "data version",
                     refresh_seconds=60, s_maxage=60, stale_while_revalidate=120,
                     parse=DataVersion.from_dict),
    )
}


def get_resource(name: str) -> ResourceSpec:
    try:
        return RESOURCES[name]
    except KeyError:
        raise KeyError(f"Unknown treasury resource: {name!r}") from None


def create_cache(client, clock: Callable[[], float] | None = None) -> PeriodicCache:
    """Build a :class:`PeriodicCache` holding typed records for every resource.

    Args:
        client: Anything with a ``load(name)`` method, normally a
            :class:`treasury.client.TreasuryClient`.
        clock: Optional monotonic clock override.
    """
    resources = [
        CachedResource(spec.name,
                       loader=lambda name=spec.name: client.load(name),
                       refresh_seconds=spec.refresh_seconds)
        for spec in RESOURCES.values()
    ]
    if clock is None:
        return PeriodicCache(resources)
    return PeriodicCache(resources, clock=clock)
