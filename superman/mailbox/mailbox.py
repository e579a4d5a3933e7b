"""A per-agent mailbox: an inbox, a priority queue and a worker that runs the handler."""

from __future__ import annotations

import queue
import sqlite3
import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable

from superman.agents.models import Priority, RoleLike
from superman.mailbox.dead_letter import DeadLetterQueue
from superman.mailbox.idempotency import IdempotencyChecker
from superman.mailbox.message import Message
from superman.mailbox.metrics import Metrics
from superman.mailbox.priority_queue import PriorityQueue

MessageHandler = Callable[[Message], Any]

_POLL_INTERVAL = 0.01
_INBOX_POLL = 0.05


class MailboxError(Exception):
    """Raised when a mailbox or mailbox manager operation fails."""


def _default_timeouts() -> dict[Priority, timedelta]:
    return {
        Priority.CRITICAL: timedelta(seconds=5),
        Priority.HIGH: timedelta(seconds=10),
        Priority.MEDIUM: timedelta(seconds=30),
        Priority.LOW: timedelta(seconds=60),
    }


@dataclass
class MailboxConfig:
    """Settings for one mailbox."""

    receiver: RoleLike
    inbox_buffer_size: int = 1000
    max_retries: int = 3
    base_delay: timedelta = timedelta(seconds=1)
    max_delay: timedelta = timedelta(minutes=5)
    processing_timeout: dict[Priority, timedelta] = field(default_factory=_default_timeouts)
    max_queue_depth: int = 10000
    enable_dlq: bool = True


def default_mailbox_config(receiver: RoleLike) -> MailboxConfig:
    """Return the default settings for a mailbox owned by ``receiver``."""
    return MailboxConfig(receiver=receiver)


class Mailbox:
    """Receives messages for one agent and hands them to its handler by priority."""

    def __init__(
        self,
        config: MailboxConfig | None,
        idempotency_checker: IdempotencyChecker | None = None,
        dlq: DeadLetterQueue | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        if config is None:
            raise MailboxError("config is required")
        self.config = config
        self.receiver = config.receiver
        self._queue = PriorityQueue()
        self._inbox: queue.Queue[Message] = queue.Queue(maxsize=max(config.inbox_buffer_size, 1))
        self._processing: dict[str, Message] = {}
        self._retries: dict[str, int] = {}
        self._timers: set[threading.Timer] = set()
        self._idempotency = idempotency_checker
        self._dlq = dlq
        self._metrics = metrics
        self._handler: MessageHandler | None = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []
        self._started = False

    def set_handler(self, handler: MessageHandler) -> None:
        """Set the function called for every message; it signals failure by raising."""
        with self._lock:
            self._handler = handler

    def start(self) -> None:
        """Start the receiving and processing threads."""
        with self._lock:
            if self._started:
                raise MailboxError("mailbox already started")
            if self._handler is None:
                raise MailboxError("message handler not set")
            self._started = True
            self._stop = threading.Event()
            self._threads = [
                threading.Thread(target=self._receive_loop, args=(self._stop,), daemon=True),
                threading.Thread(target=self._process_loop, args=(self._stop,), daemon=True),
            ]
            for thread in self._threads:
                thread.start()

    def stop(self) -> None:
        """Stop the threads and cancel pending retries; a no-op if not started."""
        with self._lock:
            if not self._started:
                return
            self._started = False
            threads = self._threads
            self._threads = []
            timers = list(self._timers)
            self._timers.clear()
            stop = self._stop
        stop.set()
        for timer in timers:
            timer.cancel()
        for thread in threads:
            thread.join()

    def send(self, msg: Message | None) -> None:
        """Deliver ``msg`` to the inbox without blocking; raise MailboxError if it cannot."""
        if msg is None:
            raise MailboxError("message is nil")
        depth = len(self._queue)
        if depth >= self.config.max_queue_depth:
            raise MailboxError(f"mailbox queue is full (depth: {depth})")
        try:
            self._inbox.put_nowait(msg)
        except queue.Full:
            raise MailboxError("mailbox inbox is full") from None
        if self._metrics is not None:
            self._metrics.record_message_sent(msg.sender, self.receiver, msg.message_type)

    def _receive_loop(self, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                msg = self._inbox.get(timeout=_INBOX_POLL)
            except queue.Empty:
                continue
            self._queue.enqueue(msg)
            if self._metrics is not None:
                self._metrics.record_queue_depth(self.receiver, msg.priority, len(self._queue))

    def _process_loop(self, stop: threading.Event) -> None:
        while not stop.is_set():
            msg = self._queue.dequeue()
            if msg is None:
                stop.wait(_POLL_INTERVAL)
                continue
            self._process(msg)

    def _timeout_for(self, priority: Priority) -> float:
        timeouts = self.config.processing_timeout
        timeout = timeouts.get(priority, timeouts.get(Priority.MEDIUM, timedelta(seconds=30)))
        return timeout.total_seconds()

    def _run_handler(self, msg: Message, timeout: float) -> str | None:
        with self._lock:
            handler = self._handler
        done = threading.Event()
        errors: list[BaseException] = []

        def run() -> None:
            try:
                handler(msg)
            except Exception as exc:
                errors.append(exc)
            finally:
                done.set()

        threading.Thread(target=run, daemon=True).start()
        if not done.wait(timeout):
            return "message processing timeout"
        if errors:
            return str(errors[0]) or type(errors[0]).__name__
        return None

    def _process(self, msg: Message) -> None:
        if self._idempotency is not None and self._idempotency.is_processed(msg.message_id):
            return
        with self._lock:
            self._processing[msg.message_id] = msg
        if self._metrics is not None:
            self._metrics.record_message_received(self.receiver, msg.message_type)

        started = time.monotonic()
        failure = self._run_handler(msg, self._timeout_for(msg.priority))
        if self._metrics is not None:
            self._metrics.record_processing_duration(time.monotonic() - started)

        with self._lock:
            self._processing.pop(msg.message_id, None)

        if failure is None:
            with self._lock:
                self._retries.pop(msg.message_id, None)
            if self._idempotency is not None:
                self._idempotency.mark_processed(msg.message_id, None)
            if self._metrics is not None:
                self._metrics.record_message_processed(self.receiver, "success")
        else:
            self._handle_failure(msg, failure)

    def _handle_failure(self, msg: Message, reason: str) -> None:
        with self._lock:
            retry_count = self._retries.get(msg.message_id, 0)
            retry = retry_count < self.config.max_retries
            if retry:
                self._retries[msg.message_id] = retry_count + 1
            else:
                self._retries.pop(msg.message_id, None)

        if retry:
            self._schedule_retry(msg, self.calculate_backoff(retry_count))
            if self._metrics is not None:
                self._metrics.record_retry(self.receiver)
            return

        if self._dlq is not None and self.config.enable_dlq:
            try:
                self._dlq.add(msg, retry_count, reason, "")
            except sqlite3.Error as exc:
                print(f"[Mailbox] Failed to store dead letter: {exc}")
        if self._metrics is not None:
            self._metrics.record_message_processed(self.receiver, "failed")

    def _schedule_retry(self, msg: Message, delay: timedelta) -> None:
        timer = threading.Timer(delay.total_seconds(), lambda: self._resend(msg, timer))
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def _resend(self, msg: Message, timer: threading.Timer) -> None:
        with self._lock:
            self._timers.discard(timer)
        try:
            self.send(msg)
        except MailboxError:
            pass

    def calculate_backoff(self, retry_count: int) -> timedelta:
        """Return the exponential retry delay for ``retry_count``, capped at ``max_delay``."""
        delay = self.config.base_delay * (2**retry_count)
        return min(delay, self.config.max_delay)

    def queue_depth(self) -> int:
        """Return the number of queued messages."""
        return len(self._queue)

    def processing_count(self) -> int:
        """Return the number of messages being handled right now."""
        with self._lock:
            return len(self._processing)

    def stats(self) -> dict[str, Any]:
        """Return the receiver, queue depth, processing count and started flag."""
        return {
            "receiver": self.receiver,
            "queue_depth": self.queue_depth(),
            "processing_count": self.processing_count(),
            "started": self.is_started(),
        }

    def is_started(self) -> bool:
        """Return whether the mailbox is running."""
        with self._lock:
            return self._started