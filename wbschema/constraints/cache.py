"""Time-limited cache of constraint lists keyed by ``instance:property``."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 300.0


def cache_key(instance_id: str, property_id: str) -> str:
    return f"{instance_id}:{property_id}"


class ConstraintCache(Generic[T]):
    """Key/value map whose entries expire ``ttl`` seconds after they are set.

    Expired entries are dropped when read. When an event loop is running
    at ``set`` time, eviction is also scheduled on it. The cache is meant
    for a single thread or event loop; share it across threads only
    behind a lock.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[T, float]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self.delete(key)
            return None
        return value

    def set(self, key: str, value: T) -> None:
        self._cancel_timer(key)
        self._entries[key] = (value, self._clock() + self.ttl)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[key] = loop.call_later(self.ttl, self._expire, key)

    def delete(self, key: str) -> None:
        self._cancel_timer(key)
        self._entries.pop(key, None)

    def clear(self, prefix: Optional[str] = None) -> None:
        """Drop every entry, or only those whose key starts with ``prefix``."""
        keys = [key for key in self._entries if prefix is None or key.startswith(prefix)]
        for key in keys:
            self.delete(key)
        logger.debug("Cleared %d constraint cache entries", len(keys))

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires_at in self._entries.values() if now < expires_at)

    def _expire(self, key: str) -> None:
        self._timers.pop(key, None)
        self._entries.pop(key, None)

    def _cancel_timer(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
