"""
Preview Cache

In-memory TTL cache for live preview results. Drafts are re-sent
on every typing pause, so identical text is analyzed often.

Key = "feedback:" + SHA-256(trimmed text + sensitivity). Text is
not lowercased: all-caps shouting is a case-sensitive signal, so
"abc" and "ABC" may legitimately analyze differently.

Thread-safe via asyncio lock.

Usage:
    from reasonbridge.cache import preview_cache
    cached = await preview_cache.get(text, "MEDIUM")
    if cached is None:
        result = feedback_orchestrator.preview(text, "MEDIUM").to_dict()
        await preview_cache.put(text, "MEDIUM", result)
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Optional

from reasonbridge.config import settings

KEY_PREFIX = "feedback:"


class PreviewCache:
    """In-memory cache with TTL eviction."""

    def __init__(self, ttl_seconds: int = 300, max_entries: int = 500):
        self._cache: dict[str, tuple[float, dict]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(text: str, sensitivity: str) -> str:
        raw = f"{text.strip()}||{sensitivity.upper()}"
        return KEY_PREFIX + hashlib.sha256(raw.encode()).hexdigest()

    async def get(self, text: str, sensitivity: str) -> Optional[dict]:
        """Return the cached result if present and not expired."""
        key = self.make_key(text, sensitivity)
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            ts, result = entry
            if time.monotonic() - ts > self._ttl:
                del self._cache[key]
                self._misses += 1
                return None

            self._hits += 1
            return {**result, "cached": True}

    async def put(self, text: str, sensitivity: str, result: dict) -> None:
        """Store a result. Evicts the oldest entry when full."""
        key = self.make_key(text, sensitivity)
        async with self._lock:
            if len(self._cache) >= self._max_entries and key not in self._cache:
                oldest_key = min(self._cache, key=lambda k: self._cache[k][0])
                del self._cache[oldest_key]

            self._cache[key] = (time.monotonic(), result)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()

    @property
    def stats(self) -> dict:
        """Cache hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "entries": len(self._cache),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }


preview_cache = PreviewCache(
    ttl_seconds=settings.CACHE_TTL_SECONDS,
    max_entries=settings.CACHE_MAX_ENTRIES,
)
