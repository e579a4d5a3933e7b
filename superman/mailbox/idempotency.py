"""Duplicate suppression for processed messages: an LRU cache with a time window."""

from __future__ import annotations

import threading
import time
import weakref
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Union

DurationLike = Union[timedelta, int, float]

_DEFAULT_MAX_SIZE = 100_000
_DEFAULT_WINDOW = timedelta(hours=24)
_CLEANUP_INTERVAL = 300.0


def _to_timedelta(value: DurationLike | None) -> timedelta:
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


@dataclass
class IdempotencyEntry:
    """A processed message; ``processed_at`` is a monotonic clock reading in seconds."""

    message_id: str
    processed_at: float
    result: Any = None


def _cleanup_loop(ref: weakref.ref, stop: threading.Event, interval: float) -> None:
    while not stop.wait(interval):
        checker = ref()
        if checker is None:
            return
        checker.remove_expired()
        del checker


class IdempotencyChecker:
    """Remembers processed message IDs for a time window, evicting the least recently used."""

    def __init__(self, max_size: int = 0, window: DurationLike | None = None) -> None:
        window_delta = _to_timedelta(window)
        self.max_size = max_size if max_size > 0 else _DEFAULT_MAX_SIZE
        self.window = window_delta if window_delta > timedelta(0) else _DEFAULT_WINDOW
        self._window_seconds = self.window.total_seconds()
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, IdempotencyEntry] = OrderedDict()

        stop = threading.Event()
        weakref.finalize(self, stop.set)
        threading.Thread(
            target=_cleanup_loop,
            args=(weakref.ref(self), stop, _CLEANUP_INTERVAL),
            daemon=True,
        ).start()

    def _expired(self, entry: IdempotencyEntry, now: float) -> bool:
        return now - entry.processed_at > self._window_seconds

    def is_processed(self, message_id: str) -> bool:
        """Return whether ``message_id`` was processed within the window."""
        with self._lock:
            entry = self._entries.get(message_id)
            if entry is None or self._expired(entry, time.monotonic()):
                return False
            self._entries.move_to_end(message_id)
            return True

    def mark_processed(self, message_id: str, result: Any = None) -> None:
        """Record ``message_id`` as processed now, with its ``result``."""
        with self._lock:
            entry = self._entries.get(message_id)
            if entry is not None:
                entry.processed_at = time.monotonic()
                entry.result = result
                self._entries.move_to_end(message_id)
                return
            self._entries[message_id] = IdempotencyEntry(
                message_id=message_id,
                processed_at=time.monotonic(),
                result=result,
            )
            if len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def result(self, message_id: str) -> Any:
        """Return the stored result; raise KeyError if unknown or outside the window."""
        with self._lock:
            entry = self._entries.get(message_id)
            if entry is None or self._expired(entry, time.monotonic()):
                raise KeyError(message_id)
            return entry.result

    def remove_expired(self) -> int:
        """Drop entries older than the window; return how many were dropped."""
        with self._lock:
            now = time.monotonic()
            expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def stats(self) -> dict[str, Any]:
        """Return the cache size, its limit and the window."""
        with self._lock:
            return {
                "cache_size": len(self._entries),
                "max_size": self.max_size,
                "window_size": str(self.window),
            }

    def clear(self) -> None:
        """Forget every entry."""
        with self._lock:
            self._entries.clear()