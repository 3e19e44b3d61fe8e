"""In-process TTL cache and in-flight request de-duplication."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict, Counter
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

AGE_BUCKETS = ((60, "<1m"), (300, "1-5m"), (900, "5-15m"), (1800, "15-30m"))


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: Any
    created_at: float
    tag: str


class TTLCache:
    """Bounded key/value store with lazy expiry.

    Entries older than ``ttl_s`` are treated as missing on :meth:`get`.
    Once ``max_entries`` is exceeded the least recently set entry is evicted.
    """

    def __init__(
        self,
        ttl_s: float,
        max_entries: int = 500,
        *,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be greater than 0")
        if max_entries <= 0:
            raise ValueError("max_entries must be greater than 0")
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self.name = name
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            logger.debug("%s miss: %s", self.name, key)
            return None
        if self._clock() - entry.created_at >= self.ttl_s:
            logger.debug("%s expired: %s", self.name, key)
            return None
        logger.debug("%s hit: %s", self.name, key)
        return entry

    def set(self, key: str, value: Any, tag: str) -> None:
        entry = CacheEntry(value=value, created_at=self._clock(), tag=tag)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("%s evicted: %s", self.name, evicted)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())
        ages: Counter = Counter()
        tags: Counter = Counter()
        expired = 0
        for entry in entries:
            age = now - entry.created_at
            ages[_age_label(age)] += 1
            tags[entry.tag] += 1
            if age >= self.ttl_s:
                expired += 1
        return {
            "name": self.name,
            "entry_count": len(entries),
            "expired_count": expired,
            "ttl_s": self.ttl_s,
            "age_distribution": dict(ages),
            "tags": dict(tags),
        }


def _age_label(age: float) -> str:
    for upper, label in AGE_BUCKETS:
        if age < upper:
            return label
    return ">=30m"


class InFlightRequests:
    """Share one in-progress call per key between concurrent callers."""

    def __init__(self) -> None:
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def run(self, key: str, fn: Callable[[], T]) -> T:
        with self._lock:
            future = self._pending.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._pending[key] = future

        if not leader:
            logger.debug("Joining in-flight fetch for %s", key)
            return future.result()

        try:
            result = fn()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._pending.pop(key, None)

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)


__all__ = ["CacheEntry", "TTLCache", "InFlightRequests"]
