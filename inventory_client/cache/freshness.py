"""In-memory snapshot cache with per-resource freshness windows."""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from ..utils.logger import get_cache_logger


@dataclass
class _Entry:
    value: Any
    fetched_at: float


class FreshnessCache:
    """Thread-safe snapshot cache keyed by resource type.

    Each key holds the last fetched snapshot and the time it was fetched.
    A snapshot is *fresh* while it is younger than the key's window;
    ``window_for`` maps a key to its window in seconds.

    Stale snapshots are kept (see ``peek``) so a failed re-fetch can still
    show the previous data.
    """

    def __init__(
        self,
        window_for: Callable[[str], float],
        clock: Callable[[], float] = time.time
    ):
        self._entries: Dict[str, _Entry] = {}
        self._window_for = window_for
        self._clock = clock
        self._lock = threading.Lock()
        self.logger = get_cache_logger()

    def get(self, key: str) -> Optional[Any]:
        """Return the snapshot for ``key`` if it is still fresh, else None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry and self._clock() - entry.fetched_at < self._window_for(key):
                self.logger.debug(f"Cache hit: {key}")
                return entry.value
        self.logger.debug(f"Cache miss: {key}")
        return None

    def is_fresh(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return bool(entry) and self._clock() - entry.fetched_at < self._window_for(key)

    def peek(self, key: str, default: Any = None) -> Any:
        """Return the snapshot for ``key`` regardless of age."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.value if entry else default

    def set(self, key: str, value: Any):
        """Replace the snapshot for ``key`` and stamp it with the current time."""
        with self._lock:
            self._entries[key] = _Entry(value=value, fetched_at=self._clock())

    def patch(self, key: str, value: Any):
        """Replace the snapshot for ``key`` keeping its original fetch time.

        Used for optimistic local updates, which must not extend freshness.
        """
        with self._lock:
            entry = self._entries.get(key)
            fetched_at = entry.fetched_at if entry else 0.0
            self._entries[key] = _Entry(value=value, fetched_at=fetched_at)

    def last_fetched(self, key: str) -> Optional[float]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.fetched_at if entry and entry.fetched_at else None

    def invalidate(self, *keys: str):
        """Mark ``keys`` stale; the snapshots stay readable through ``peek``."""
        with self._lock:
            for key in keys:
                entry = self._entries.get(key)
                if entry:
                    entry.fetched_at = 0.0
        if keys:
            self.logger.debug(f"Invalidated: {', '.join(keys)}")

    def clear(self):
        with self._lock:
            self._entries.clear()

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._entries)
