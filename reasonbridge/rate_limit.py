"""
Rate Limiter — Per-Caller Request Throttling

Sliding window rate limiter backed by an in-memory dict.

Two limit profiles:
  - Default:  60 requests/minute, 1000/hour
  - Preview:  10 requests/minute, 300/hour (live-typing feedback)

Callers are identified by API key hash, or by client host when
auth is disabled.
"""

from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from fastapi import HTTPException


# Maximum number of unique callers tracked before LRU eviction
MAX_RATE_LIMIT_KEYS = 5000

# Longest window checked; older timestamps are dropped.
MAX_WINDOW_SECONDS = 3600


@dataclass
class RateWindow:
    """Sliding window counter."""
    timestamps: list[float] = field(default_factory=list)

    def prune(self, max_age: float = MAX_WINDOW_SECONDS):
        cutoff = time.time() - max_age
        self.timestamps = [t for t in self.timestamps if t > cutoff]

    def count_within(self, window_seconds: float) -> int:
        cutoff = time.time() - window_seconds
        return sum(1 for t in self.timestamps if t > cutoff)

    def record(self):
        self.timestamps.append(time.time())


@dataclass
class RateLimits:
    """Rate limit configuration."""
    per_minute: int = 60
    per_hour: int = 1000


DEFAULT_LIMITS = RateLimits(
    per_minute=int(os.getenv("REASONBRIDGE_RATE_PER_MINUTE", "60")),
    per_hour=int(os.getenv("REASONBRIDGE_RATE_PER_HOUR", "1000")),
)

PREVIEW_LIMITS = RateLimits(
    per_minute=int(os.getenv("REASONBRIDGE_PREVIEW_RATE_PER_MINUTE", "10")),
    per_hour=int(os.getenv("REASONBRIDGE_PREVIEW_RATE_PER_HOUR", "300")),
)

# LRU-bounded store: "<scope>:<caller>" → RateWindow
_windows: OrderedDict[str, RateWindow] = OrderedDict()
_lock = threading.Lock()

RATE_LIMIT_ENABLED = os.getenv("REASONBRIDGE_RATE_LIMIT", "true").lower() == "true"


def check_rate_limit(
    caller_id: Optional[str],
    limits: Optional[RateLimits] = None,
    scope: str = "default",
) -> None:
    """
    Check and enforce rate limits for a caller.

    Args:
        caller_id: Key hash prefix or client host. None = no limit.
        limits: Override the default limits.
        scope: Separate window per endpoint family (e.g. "preview").

    Raises:
        HTTPException 429 if a limit is exceeded.
    """
    if not RATE_LIMIT_ENABLED:
        return
    if caller_id is None:
        return

    limits = limits or DEFAULT_LIMITS
    window_key = f"{scope}:{caller_id}"

    with _lock:
        if window_key not in _windows:
            if len(_windows) >= MAX_RATE_LIMIT_KEYS:
                _windows.popitem(last=False)
            _windows[window_key] = RateWindow()
        else:
            _windows.move_to_end(window_key)

        window = _windows[window_key]
        window.prune()

        if window.count_within(60) >= limits.per_minute:
            retry_after = 60 - int(time.time() % 60)
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded: {limits.per_minute} requests/minute. "
                       f"Retry after {retry_after} seconds.",
                headers={"Retry-After": str(retry_after)},
            )

        if window.count_within(MAX_WINDOW_SECONDS) >= limits.per_hour:
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded: {limits.per_hour} requests/hour.",
                headers={"Retry-After": "3600"},
            )

        window.record()


def get_usage(caller_id: str, scope: str = "default") -> dict:
    """Current usage for a caller within one scope."""
    with _lock:
        window = _windows.get(f"{scope}:{caller_id}")
        if not window:
            return {"minute": 0, "hour": 0}
        return {
            "minute": window.count_within(60),
            "hour": window.count_within(MAX_WINDOW_SECONDS),
        }


def reset_rate_limits() -> None:
    with _lock:
        _windows.clear()
