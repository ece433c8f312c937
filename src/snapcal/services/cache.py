"""In-memory TTL cache with pattern invalidation."""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol, TypeVar

T = TypeVar("T")


class Cache(Protocol):
    """Cache interface for keyed read-through data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    async def get_or_compute(
        self, key: str, ttl_seconds: int, compute: Callable[[], Awaitable[T]]
    ) -> T:
        """Return the cached value or compute, store and return a fresh one."""

    def invalidate(self, key: str) -> None:
        """Drop a single key."""

    def invalidate_pattern(self, pattern: str | re.Pattern[str]) -> None:
        """Drop every key matching a regular expression."""

    def clear(self) -> None:
        """Drop every key."""

    def clear_date_sensitive(self) -> None:
        """Drop every entry-derived key, for all users."""


class CacheKeys:
    """Cache key builders, scoped per user."""

    @staticmethod
    def entries(user_id: str) -> str:
        return f"food:{user_id}:entries"

    @staticmethod
    def entries_lite(user_id: str) -> str:
        return f"food:{user_id}:entries:lite"

    @staticmethod
    def summaries_lite(user_id: str) -> str:
        return f"food:{user_id}:summaries:lite"

    @staticmethod
    def entry_image(user_id: str, entry_id: str) -> str:
        return f"food:{user_id}:image:{entry_id}"

    @staticmethod
    def daily_goal(user_id: str) -> str:
        return f"user:{user_id}:goal"

    @staticmethod
    def profile(user_id: str) -> str:
        return f"user:{user_id}:profile"

    @staticmethod
    def onboarding(user_id: str) -> str:
        return f"user:{user_id}:onboarding"

    @staticmethod
    def food_pattern(user_id: str) -> str:
        """Match every entry-derived key of one user."""
        return rf"^food:{re.escape(user_id)}:"

    @staticmethod
    def date_sensitive_pattern() -> str:
        """Match entry-derived keys of every user."""
        return r"^food:"




@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


def _detached(value: T) -> T:
    """Return a shallow copy of list values so callers can't mutate the cache."""
    if isinstance(value, list):
        return list(value)  # type: ignore[return-value]
    return value


@dataclass
class InMemoryCache(Cache):
    """Process-wide cache, constructed once and injected into services.

    Entry-derived keys are dropped the first time the cache is read on a new
    calendar day, so "today" views never outlive midnight.
    """

    _entries: dict[str, _CacheEntry]
    _generation: int
    _day: date
    today: Callable[[], date]

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._entries = {}
        self._generation = 0
        self.today = today
        self._day = today()

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        self.roll_over()
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return _detached(entry.value)

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=_detached(value), expires_at=expires_at)

    async def get_or_compute(
        self, key: str, ttl_seconds: int, compute: Callable[[], Awaitable[T]]
    ) -> T:
        """Read through the cache.

        A failed compute stores nothing and propagates. A compute that
        overlaps an invalidation still returns its result but is not stored.
        Concurrent misses on the same key may compute twice; the last result
        wins.
        """
        self.roll_over()
        entry = self._entries.get(key)
        if entry is not None and datetime.now(tz=UTC) < entry.expires_at:
            return _detached(entry.value)  # type: ignore[return-value]
        generation = self._generation
        value = await compute()
        if generation == self._generation:
            self.set(key, value, ttl_seconds)
        return _detached(value)

    def invalidate(self, key: str) -> None:
        """Drop a single key."""
        self._generation += 1
        self._entries.pop(key, None)

    def invalidate_pattern(self, pattern: str | re.Pattern[str]) -> None:
        """Drop every key matching a regular expression."""
        self._generation += 1
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        for key in [key for key in self._entries if compiled.search(key)]:
            del self._entries[key]

    def clear(self) -> None:
        """Drop every key."""
        self._generation += 1
        self._entries.clear()

    def clear_date_sensitive(self) -> None:
        """Drop every entry-derived key, for all users."""
        self.invalidate_pattern(CacheKeys.date_sensitive_pattern())

    def roll_over(self) -> bool:
        """Drop entry-derived keys if the date changed since the last read."""
        current = self.today()
        if current == self._day:
            return False
        self._day = current
        self.clear_date_sensitive()
        return True

    def keys(self) -> list[str]:
        """Return the keys currently held, expired or not."""
        return list(self._entries)
