"""In-memory expiring cache with stale-on-failure fallback."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_TTL = 600  # 10 minutes

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A computed value and the absolute time (epoch seconds) it goes stale."""

    value: V
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at


class _Slot(Generic[V]):
    """Per-key state: its lock, the last good entry and the last attempt's outcome."""

    __slots__ = ("lock", "entry", "attempts", "error")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.entry: CacheEntry[V] | None = None
        self.attempts = 0
        self.error: Exception | None = None


class ExpiringCache(Generic[K, V]):
    """Memoize an async, possibly failing computation per key.

    A fresh entry is returned as-is. A stale entry triggers a recompute; if
    that fails the stale value is returned and a warning is logged. A key
    that has never been computed successfully propagates the failure.

    Each key has its own lock, held for the whole read-compute-write, so at
    most one computation per key is in flight. Callers that queued behind
    an attempt take its outcome (new value, stale value or error) instead
    of computing again. Unrelated keys never wait on each other. Slots are
    never evicted.
    """

    def __init__(self, ttl: float = DEFAULT_TTL):
        if ttl < 0:
            raise ValueError(f"ttl must not be negative, got {ttl}")
        self.ttl = ttl
        self._slots: dict[K, _Slot[V]] = {}

    def __len__(self) -> int:
        return sum(1 for slot in self._slots.values() if slot.entry is not None)

    def __contains__(self, key: object) -> bool:
        slot = self._slots.get(key)
        return slot is not None and slot.entry is not None

    def _slot(self, key: K) -> _Slot[V]:
        # No await between lookup and insert, so concurrent first accesses
        # to a key always end up sharing one slot.
        return self._slots.setdefault(key, _Slot())

    def _store(self, slot: _Slot[V], value: V) -> V:
        slot.entry = CacheEntry(value=value, expires_at=time.time() + self.ttl)
        slot.error = None
        slot.attempts += 1
        return value

    def _shared_outcome(self, slot: _Slot[V], key: K) -> V:
        if slot.error is None:
            logger.debug("Sharing the value just computed for %s", key)
            return slot.entry.value
        if slot.entry is not None:
            logger.debug("Sharing the stale value for %s after a failed refresh", key)
            return slot.entry.value
        raise slot.error

    async def get_or_compute(self, key: K, compute: Callable[[], Awaitable[V]]) -> V:
        """Return the cached value for ``key``, computing it when missing or stale."""
        slot = self._slot(key)
        seen = slot.attempts
        async with slot.lock:
            if slot.attempts != seen:
                # An attempt finished while this caller waited for the lock.
                return self._shared_outcome(slot, key)

            previous = slot.entry
            if previous is not None and previous.is_fresh(time.time()):
                logger.debug("Cache hit for %s", key)
                return previous.value

            if previous is None:
                logger.debug("Cache miss for %s", key)
                try:
                    value = await compute()
                except Exception as exc:
                    exc.add_note(f"Nothing cached for {key!r} to fall back on")
                    slot.error = exc
                    slot.attempts += 1
                    raise
                return self._store(slot, value)

            logger.debug("Cache entry for %s expired, recomputing", key)
            try:
                value = await compute()
            except Exception as exc:
                slot.error = exc
                slot.attempts += 1
                logger.warning(
                    "Failed to refresh %s, serving the stale value instead: %s",
                    key,
                    exc,
                )
                return previous.value
            return self._store(slot, value)
