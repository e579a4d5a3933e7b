"""Counters, gauges and rolling timing windows for the mailbox system."""

from __future__ import annotations

import threading
import time
from collections import deque
from datetime import timedelta
from typing import Any, Iterable, Union

from superman.agents.models import RoleLike, message_type_name, priority_name

DurationLike = Union[timedelta, int, float]

_LATENCY_WINDOW = 1000
_PROCESSING_WINDOW = 1000
_WAL_WINDOW = 100


def format_key(*args: str) -> str:
    """Join the parts of a metric key with underscores."""
    return "_".join(args)


def _to_millis(value: DurationLike) -> int:
    """Convert a duration (timedelta or seconds) to whole milliseconds."""
    if isinstance(value, timedelta):
        return int(value / timedelta(milliseconds=1))
    return int(value * 1000)


def _p99(values: Iterable[int]) -> int:
    ordered = sorted(values)
    if not ordered:
        return 0
    index = min(int(len(ordered) * 0.99), len(ordered) - 1)
    return ordered[index]


def _average(values: Iterable[int]) -> int:
    items = list(values)
    if not items:
        return 0
    return sum(items) // len(items)


class Metrics:
    """Thread-safe collector of mailbox metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._init_state()

    def _init_state(self) -> None:
        self._messages_sent: dict[str, int] = {}
        self._messages_received: dict[str, int] = {}
        self._messages_processed: dict[str, int] = {}
        self._message_latency: deque[int] = deque(maxlen=_LATENCY_WINDOW)
        self._queue_depth: dict[str, int] = {}
        self._processing_duration: deque[int] = deque(maxlen=_PROCESSING_WINDOW)
        self._retries: dict[str, int] = {}
        self._wal_write_latency: deque[int] = deque(maxlen=_WAL_WINDOW)
        self._wal_size_bytes = 0
        self._dlq_depth = 0
        self._start = time.monotonic()

    @staticmethod
    def _bump(counter: dict[str, int], key: str) -> None:
        counter[key] = counter.get(key, 0) + 1

    def record_message_sent(self, sender: RoleLike, receiver: RoleLike, message_type: int) -> None:
        """Count a message sent from ``sender`` to ``receiver``."""
        key = format_key(str(sender), str(receiver), message_type_name(message_type))
        with self._lock:
            self._bump(self._messages_sent, key)

    def record_message_received(self, receiver: RoleLike, message_type: int) -> None:
        """Count a message taken up for processing by ``receiver``."""
        key = format_key(str(receiver), message_type_name(message_type))
        with self._lock:
            self._bump(self._messages_received, key)

    def record_message_processed(self, receiver: RoleLike, status: str) -> None:
        """Count a finished message with its outcome ``status``."""
        key = format_key(str(receiver), status)
        with self._lock:
            self._bump(self._messages_processed, key)

    def record_message_latency(self, latency: DurationLike) -> None:
        """Add a delivery latency to the rolling window of the last 1000."""
        with self._lock:
            self._message_latency.append(_to_millis(latency))

    def record_queue_depth(self, receiver: RoleLike, priority: int, depth: int) -> None:
        """Set the current queue depth for ``receiver`` at ``priority``."""
        key = format_key(str(receiver), priority_name(priority))
        with self._lock:
            self._queue_depth[key] = depth

    def record_processing_duration(self, duration: DurationLike) -> None:
        """Add a processing time to the rolling window of the last 1000."""
        with self._lock:
            self._processing_duration.append(_to_millis(duration))

    def record_retry(self, receiver: RoleLike) -> None:
        """Count a retry scheduled for ``receiver``."""
        with self._lock:
            self._bump(self._retries, str(receiver))

    def record_wal_write_latency(self, latency: DurationLike) -> None:
        """Add a WAL write latency to the rolling window of the last 100."""
        with self._lock:
            self._wal_write_latency.append(_to_millis(latency))

    def set_wal_size(self, size: int) -> None:
        """Set the WAL size in bytes."""
        with self._lock:
            self._wal_size_bytes = size

    def set_dlq_depth(self, depth: int) -> None:
        """Set the number of messages in the dead letter queue."""
        with self._lock:
            self._dlq_depth = depth

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of every metric; timings are in milliseconds."""
        with self._lock:
            return {
                "messages_sent_total": dict(self._messages_sent),
                "messages_received_total": dict(self._messages_received),
                "messages_processed_total": dict(self._messages_processed),
                "message_latency_p99": _p99(self._message_latency),
                "message_latency_avg": _average(self._message_latency),
                "mailbox_queue_depth": dict(self._queue_depth),
                "processing_duration_p99": _p99(self._processing_duration),
                "processing_duration_avg": _average(self._processing_duration),
                "mailbox_retry_total": dict(self._retries),
                "wal_write_latency_p99": _p99(self._wal_write_latency),
                "wal_write_latency_avg": _average(self._wal_write_latency),
                "wal_size_bytes": self._wal_size_bytes,
                "dlq_depth_total": self._dlq_depth,
                "uptime_seconds": time.monotonic() - self._start,
            }

    def reset(self) -> None:
        """Clear every metric and restart the uptime clock."""
        with self._lock:
            self._init_state()