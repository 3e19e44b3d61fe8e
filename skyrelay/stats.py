from __future__ import annotations

import datetime as dt
import logging
import threading
from collections import Counter, OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ["requests", "successes", "latency_total_ms"]


@dataclass(frozen=True, slots=True)
class StatsEvent:
    day: dt.date
    key: str
    success: bool
    latency_ms: float
    source: str
    action: str


@dataclass(slots=True)
class StatsBucket:
    day: dt.date
    key: str
    requests: int = 0
    successes: int = 0
    latency_total_ms: float = 0.0
    sources: Counter = field(default_factory=Counter)
    actions: Counter = field(default_factory=Counter)

    def add(self, event: StatsEvent) -> None:
        self.requests += 1
        if event.success:
            self.successes += 1
        self.latency_total_ms += max(event.latency_ms, 0.0)
        self.sources[event.source] += 1
        self.actions[event.action] += 1


def _summary(requests: int, successes: int, latency_total_ms: float) -> Dict[str, Any]:
    return {
        "requests": requests,
        "successes": successes,
        "success_rate": round(successes / requests, 4) if requests else 0.0,
        "avg_latency_ms": round(latency_total_ms / requests, 1) if requests else 0.0,
    }


class StatsAggregator:
    """Rolling request counters keyed by ``(day, route or airport)``.

    At most ``max_buckets`` buckets are kept; when a new bucket pushes the
    count over the ceiling the oldest inserted bucket is dropped. Counts are
    therefore approximate over long windows.
    """

    def __init__(self, max_buckets: int = 100) -> None:
        if max_buckets <= 0:
            raise ValueError("max_buckets must be greater than 0")
        self.max_buckets = max_buckets
        self._buckets: "OrderedDict[Tuple[dt.date, str], StatsBucket]" = OrderedDict()
        self._lock = threading.Lock()

    def record(self, event: StatsEvent) -> None:
        bucket_key = (event.day, event.key)
        with self._lock:
            bucket = self._buckets.get(bucket_key)
            if bucket is None:
                bucket = StatsBucket(day=event.day, key=event.key)
                self._buckets[bucket_key] = bucket
                while len(self._buckets) > self.max_buckets:
                    (old_day, old_key), _ = self._buckets.popitem(last=False)
                    logger.debug("Evicted stats bucket %s %s", old_day, old_key)
            bucket.add(event)

    def bucket(self, day: dt.date, key: str) -> Optional[StatsBucket]:
        with self._lock:
            return self._buckets.get((day, key))

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def frame(self) -> pd.DataFrame:
        """One row per bucket."""
        with self._lock:
            rows = [
                (b.day, b.key, b.requests, b.successes, b.latency_total_ms)
                for b in self._buckets.values()
            ]
        return pd.DataFrame(rows, columns=["day", "key", *NUMERIC_COLUMNS])

    def snapshot(self, today: Optional[dt.date] = None) -> Dict[str, Any]:
        today = today or dt.datetime.now(dt.timezone.utc).date()
        df = self.frame()
        with self._lock:
            todays = [b for b in self._buckets.values() if b.day == today]

        daily = df.groupby("day", sort=True)[NUMERIC_COLUMNS].sum()
        keys_per_day = df.groupby("day")["key"].nunique()

        historical: Dict[str, Dict[str, Any]] = {}
        for day, row in daily.iterrows():
            if day == today:
                continue
            summary = _summary(
                int(row["requests"]), int(row["successes"]), float(row["latency_total_ms"])
            )
            summary["keys"] = int(keys_per_day[day])
            historical[day.isoformat()] = summary

        sources: Counter = Counter()
        actions: Counter = Counter()
        for b in todays:
            sources.update(b.sources)
            actions.update(b.actions)

        today_summary = _summary(
            sum(b.requests for b in todays),
            sum(b.successes for b in todays),
            sum(b.latency_total_ms for b in todays),
        )
        today_summary.update(
            {
                "day": today.isoformat(),
                "sources": dict(sources),
                "actions": dict(actions),
                "top_keys": self._top_keys(df, today),
            }
        )
        return {"today": today_summary, "historical": historical, "buckets": len(df)}

    @staticmethod
    def _top_keys(df: pd.DataFrame, today: dt.date, limit: int = 5) -> List[Dict[str, Any]]:
        if df.empty:
            return []
        rows = df[df["day"] == today].sort_values(
            ["requests", "key"], ascending=[False, True]
        )
        return [
            {"key": r.key, "requests": int(r.requests)}
            for r in rows.head(limit).itertuples(index=False)
        ]


__all__ = ["StatsEvent", "StatsBucket", "StatsAggregator"]
