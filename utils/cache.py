"""In-memory periodic revalidating cache.

Each named resource has a loader and a refresh period. Readers get the last
good value immediately (stale-while-revalidate) while a refetch runs in the
background; concurrent callers share a single in-flight fetch per resource.

Usage::

    cache = PeriodicCache([
        CachedResource("stats", loader=client.get_treasury_stats, refresh_seconds=300),
    ])
    cache.start()                      # arm periodic refresh timers
    entry = cache.read("stats")        # value, error, staleness flags
    unsubscribe = cache.subscribe("stats", lambda entry: print(entry.value))
    ...
    cache.close()                      # cancel timers; late results are dropped
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)

Subscriber = Callable[["CacheEntry"], None]


@dataclass(frozen=True)
class CacheEntry:
    """Immutable snapshot of one resource's cache state.

    ``value`` is the last successful result and survives failed refetches;
    ``error`` is the most recent failure, cleared by the next success.
    """

    name: str
    value: Any = None
    error: BaseException | None = None
    updated_at: float | None = None     # clock() of last success
    checked_at: float | None = None     # clock() of last attempt, success or not
    is_validating: bool = False

    @property
    def has_value(self) -> bool:
        return self.updated_at is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "has_value": self.has_value,
            "error": str(self.error) if self.error is not None else None,
            "updated_at": self.updated_at,
            "checked_at": self.checked_at,
            "is_validating": self.is_validating,
        }


@dataclass(frozen=True)
class CachedResource:
    """A named loader with its revalidation period."""

    name: str
    loader: Callable[[], Any]
    refresh_seconds: float


@dataclass
class _Slot:
    resource: CachedResource
    entry: CacheEntry
    subscribers: list[Subscriber] = field(default_factory=list)
    inflight: Future | None = None
    timer: threading.Timer | None = None


class PeriodicCache:
    """Thread-safe periodic cache over a fixed set of named resources."""

    def __init__(self, resources: Iterable[CachedResource],
                 clock: Callable[[], float] = time.monotonic,
                 max_workers: int = 4) -> None:
        """Initialise the cache.

        Args:
            resources: Resources to manage; names must be unique.
            clock: Monotonic time source (injectable for tests).
            max_workers: Size of the background fetch pool.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._slots: dict[str, _Slot] = {}
        for resource in resources:
            if resource.name in self._slots:
                raise ValueError(f"Duplicate cached resource: {resource.name!r}")
            self._slots[resource.name] = _Slot(resource, CacheEntry(resource.name))
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="cache-refresh")
        self._started = False
        self._destroyed = False

    # ── Reads ────────────────────────────────────────────────────────────────

    @property
    def names(self) -> list[str]:
        return list(self._slots)

    def _slot(self, name: str) -> _Slot:
        try:
            return self._slots[name]
        except KeyError:
            raise KeyError(f"Unknown cached resource: {name!r}") from None

    def get_snapshot(self, name: str) -> CacheEntry:
        """Return the current entry for *name* without triggering a fetch."""
        slot = self._slot(name)
        with self._lock:
            return slot.entry

    def is_stale(self, name: str) -> bool:
        """True when *name* was never fetched or its period has elapsed."""
        slot = self._slot(name)
        with self._lock:
            checked_at = slot.entry.checked_at
        if checked_at is None:
            return True
        return self._clock() - checked_at >= slot.resource.refresh_seconds

    def read(self, name: str, timeout: float | None = None) -> CacheEntry:
        """Stale-while-revalidate read.

        An entry that has never held a value is fetched synchronously; a
        stale entry is returned as-is while a background refetch starts.
        When the first fetch outlasts *timeout* the still-validating
        snapshot is returned and the fetch keeps running.
        """
        entry = self.get_snapshot(name)
        if not self.is_stale(name):
            return entry
        if entry.has_value:
            self.refresh(name, wait=False)
            return self.get_snapshot(name)
        try:
            return self.refresh(name, wait=True, timeout=timeout)
        except FutureTimeoutError:
            logger.warning("first load still running resource=%s timeout_s=%s", name, timeout)
            return self.get_snapshot(name)

    def stats(self) -> dict[str, dict[str, Any]]:
        """Per-resource status, suitable for a health endpoint."""
        with self._lock:
            entries = [slot.entry for slot in self._slots.values()]
        now = self._clock()
        out = {}
        for entry in entries:
            data = entry.to_dict()
            data["age_seconds"] = (
                round(now - entry.updated_at, 3) if entry.updated_at is not None else None
            )
            out[entry.name] = data
        return out

    # ── Subscriptions ────────────────────────────────────────────────────────

    def subscribe(self, name: str, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for every settled fetch of *name*.

        The callback is invoked immediately with the cached entry when one
        exists, and a background refetch starts if the entry is stale.

        Returns:
            A function that removes the subscription (idempotent).
        """
        slot = self._slot(name)
        with self._lock:
            slot.subscribers.append(callback)
            entry = slot.entry

        if entry.has_value:
            self._notify_one(callback, entry)
        if self.is_stale(name):
            self.refresh(name, wait=False)

        def unsubscribe() -> None:
            with self._lock:
                if callback in slot.subscribers:
                    slot.subscribers.remove(callback)

        return unsubscribe

    def _notify_one(self, callback: Subscriber, entry: CacheEntry) -> None:
        try:
            callback(entry)
        except Exception:
            logger.exception("cache subscriber failed for %s", entry.name)

    # ── Fetching ─────────────────────────────────────────────────────────────

    def refresh(self, name: str, wait: bool = True,
                timeout: float | None = None) -> CacheEntry:
        """Fetch *name* now, joining an in-flight fetch if there is one.

        Args:
            name: Resource name.
            wait: Block until the fetch settles (default True).
            timeout: Maximum seconds to wait when *wait* is set.

        Returns:
            The settled entry when waiting, otherwise the current entry
            (with ``is_validating`` set while the fetch runs).
        """
        slot = self._slot(name)
        with self._lock:
            if self._destroyed:
                return slot.entry
            future = slot.inflight
            if future is None:
                future = Future()
                slot.inflight = future
                slot.entry = replace(slot.entry, is_validating=True)
                self._executor.submit(self._run, slot, future)
            current = slot.entry

        if not wait:
            return current
        return future.result(timeout=timeout)

    def _run(self, slot: _Slot, future: Future) -> None:
        name = slot.resource.name
        started = self._clock()
        try:
            value = slot.resource.loader()
        except Exception as exc:
            logger.warning("refresh failed resource=%s error=%s", name, exc)
            self._settle(slot, future, error=exc, at=self._clock())
        else:
            logger.debug("refresh ok resource=%s duration_s=%.3f",
                         name, self._clock() - started)
            self._settle(slot, future, value=value, at=self._clock())

    def _settle(self, slot: _Slot, future: Future, *, at: float,
                value: Any = None, error: BaseException | None = None) -> None:
        with self._lock:
            if slot.inflight is future:
                slot.inflight = None
            if self._destroyed:
                entry = slot.entry
                subscribers: list[Subscriber] = []
            else:
                if error is None:
                    entry = replace(slot.entry, value=value, error=None,
                                    updated_at=at, checked_at=at,
                                    is_validating=False)
                else:
                    entry = replace(slot.entry, error=error, checked_at=at,
                                    is_validating=False)
                slot.entry = entry
                subscribers = list(slot.subscribers)

        # Subscribers run before waiters are released.
        for callback in subscribers:
            self._notify_one(callback, entry)
        if not future.done():
            future.set_result(entry)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Arm one repeating refresh timer per resource."""
        with self._lock:
            if self._started or self._destroyed:
                return
            self._started = True
            for slot in self._slots.values():
                self._arm(slot)

    def _arm(self, slot: _Slot) -> None:
        # Caller holds self._lock.
        timer = threading.Timer(slot.resource.refresh_seconds, self._on_timer, args=(slot,))
        timer.daemon = True
        slot.timer = timer
        timer.start()

    def _on_timer(self, slot: _Slot) -> None:
        with self._lock:
            if self._destroyed:
                return
            self._arm(slot)
        self.refresh(slot.resource.name, wait=False)

    def close(self) -> None:
        """Cancel timers and stop accepting results. Safe to call twice."""
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True
            pending = []
            for slot in self._slots.values():
                if slot.timer is not None:
                    slot.timer.cancel()
                    slot.timer = None
                if slot.inflight is not None:
                    pending.append((slot.inflight, slot.entry))
                    slot.inflight = None
                slot.subscribers.clear()
        for future, entry in pending:
            if not future.done():
                future.set_result(entry)
        self._executor.shutdown(wait=False, cancel_futures=True)

    @property
    def closed(self) -> bool:
        return self._destroyed

    def __enter__(self) -> "PeriodicCache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
