"""In-memory request metrics: counters and latency histograms keyed by tags."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, List, Tuple

TagKey = Tuple[str, Tuple[Tuple[str, str], ...]]


def _tag_key(name: str, tags: Dict[str, str]) -> TagKey:
    return name, tuple(sorted(tags.items()))


@dataclass
class Counter:
    name: str
    tags: Dict[str, str]
    _value: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False)

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class Histogram:
    name: str
    tags: Dict[str, str]
    _values: List[float] = field(default_factory=list)
    _lock: Lock = field(default_factory=Lock, repr=False)
    # Sliding window; the oldest sample goes first.
    _max_samples: int = 2000

    def observe(self, value: float) -> None:
        with self._lock:
            if len(self._values) >= self._max_samples:
                self._values.pop(0)
            self._values.append(value)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            vals = sorted(self._values)
        if not vals:
            return {"count": 0, "avg": 0.0, "p95": 0.0, "min": 0.0, "max": 0.0}
        count = len(vals)
        return {
            "count": count,
            "avg": sum(vals) / count,
            "p95": vals[int(0.95 * (count - 1))],
            "min": vals[0],
            "max": vals[-1],
        }


class MetricsRegistry:
    """Thread-safe registry; one instance per application."""

    def __init__(self) -> None:
        self._counters: Dict[TagKey, Counter] = {}
        self._histograms: Dict[TagKey, Histogram] = {}
        self._lock = Lock()

    def counter(self, name: str, **tags: str) -> Counter:
        key = _tag_key(name, tags)
        with self._lock:
            ctr = self._counters.get(key)
            if ctr is None:
                ctr = self._counters[key] = Counter(name=name, tags=tags)
            return ctr

    def histogram(self, name: str, **tags: str) -> Histogram:
        key = _tag_key(name, tags)
        with self._lock:
            hist = self._histograms.get(key)
            if hist is None:
                hist = self._histograms[key] = Histogram(name=name, tags=tags)
            return hist

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            counters = list(self._counters.values())
            histograms = list(self._histograms.values())
        return {
            "counters": [{"name": c.name, "tags": c.tags, "value": c.value()} for c in counters],
            "histograms": [{"name": h.name, "tags": h.tags, **h.snapshot()} for h in histograms],
            "generatedAt": time.time(),
        }


def route_label(scope: Dict[str, Any]) -> str:
    """
    Route template for a request (`/meal/{name}`), so labels stay bounded.

    Requests that matched no API route (404s, static photos) share `<unmatched>`.
    """
    route = scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"
