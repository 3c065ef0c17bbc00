"""
In-process result cache with absolute expiry.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResultCache:
    """
    Key/value cache whose entries expire a fixed time after they were set.
    """

    def __init__(self, default_ttl_seconds: int = 300, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the cache.

        Args:
            default_ttl_seconds: Time-to-live used when set() gets no ttl
            clock: Source of timezone-aware "now"
        """
        self.default_ttl_seconds = default_ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[Any, datetime]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at <= self.clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = (value, self.clock() + timedelta(seconds=ttl))

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self.clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)
