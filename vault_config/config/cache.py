"""In-memory cache state for the composed service configuration.

The cache holds at most one entry and performs no I/O. Callers pass the
current time explicitly so expiry can be tested without a network mock.

State transitions:
    UNINITIALIZED -> FETCHING -> LIVE_CACHED | FALLBACK
    LIVE_CACHED   -> FETCHING on expiry or invalidation
    FALLBACK      -> FETCHING on every read

An expired or invalidated entry, or an invalidated fetch, returns the
cache to UNINITIALIZED until the next fetch begins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import ServiceConfig

CACHE_DURATION_SECONDS = 300.0


class ConfigState(str, Enum):
    """Where the current configuration comes from."""
    UNINITIALIZED = "uninitialized"
    FETCHING = "fetching"
    LIVE_CACHED = "live_cached"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CacheEntry:
    """A composed configuration and the time it was fetched."""
    config: ServiceConfig
    fetched_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.fetched_at < ttl


class ConfigCache:
    """Single-entry configuration cache with a time-based validity window."""

    def __init__(self, ttl: float = CACHE_DURATION_SECONDS):
        self._ttl = ttl
        self._entry: Optional[CacheEntry] = None
        self._state = ConfigState.UNINITIALIZED

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def state(self) -> ConfigState:
        return self._state

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def get(self, now: float) -> Optional[ServiceConfig]:
        """Return the cached configuration if it is still fresh."""
        if self._entry is None:
            return None
        if not self._entry.is_fresh(now, self._ttl):
            self.invalidate()
            return None
        return self._entry.config

    def begin_fetch(self) -> None:
        self._state = ConfigState.FETCHING

    def store(self, config: ServiceConfig, now: float) -> CacheEntry:
        """Store a live configuration fetched at ``now``."""
        if config.is_fallback:
            raise ValueError("Fallback configuration must not be cached")
        self._entry = CacheEntry(config=config, fetched_at=now)
        self._state = ConfigState.LIVE_CACHED
        return self._entry

    def mark_fallback(self) -> None:
        """Record that the last fetch degraded to fallback; nothing is stored."""
        self._entry = None
        self._state = ConfigState.FALLBACK

    def invalidate(self) -> None:
        """Drop the cached entry so the next read refetches."""
        self._entry = None
        if self._state in (ConfigState.LIVE_CACHED, ConfigState.FETCHING):
            self._state = ConfigState.UNINITIALIZED
