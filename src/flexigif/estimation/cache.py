"""Memoization for metadata-derived size estimates."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from flexigif.domain.models import VideoMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, float, int, int, int, int]


def make_cache_key(kind: str, metadata: VideoMetadata) -> CacheKey:
    """Key an estimate by kind and every metadata field the formulas read."""
    return (
        kind,
        metadata.duration,
        metadata.width,
        metadata.height,
        metadata.fps,
        metadata.size,
    )


class EstimateCache:
    """Thread-safe in-memory estimate cache.

    Estimates are pure functions of the key, so entries never go stale;
    clear() only exists to bound memory in long-lived processes.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, object] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: CacheKey, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing and storing it if absent."""
        with self._lock:
            if key in self._entries:
                self.hits += 1
                return self._entries[key]  # type: ignore[return-value]
        value = compute()
        with self._lock:
            self.misses += 1
            self._entries.setdefault(key, value)
            return self._entries[key]  # type: ignore[return-value]

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("Cleared %d cached estimates", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
