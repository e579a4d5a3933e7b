"""A dead letter queue for messages that could not be processed, kept in SQLite."""

from __future__ import annotations

import json
import queue
import sqlite3
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from superman.agents.models import AgentRole, RoleLike
from superman.mailbox.message import Message

_SCHEMA = """
CREATE TABLE IF NOT EXISTS dead_letter_queue (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    message_id TEXT UNIQUE NOT NULL,
    sender TEXT NOT NULL,
    receiver TEXT NOT NULL,
    content BLOB NOT NULL,
    failed_at TIMESTAMP NOT NULL,
    retry_count INTEGER NOT NULL DEFAULT 0,
    reason TEXT,
    stack_trace TEXT,
    status TEXT DEFAULT 'pending',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_status ON dead_letter_queue(status);
CREATE INDEX IF NOT EXISTS idx_failed_at ON dead_letter_queue(failed_at);
CREATE INDEX IF NOT EXISTS idx_receiver ON dead_letter_queue(receiver);
"""

_UPSERT = """
INSERT INTO dead_letter_queue
(message_id, sender, receiver, content, failed_at, retry_count, reason, stack_trace, status)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(message_id) DO UPDATE SET
    retry_count = excluded.retry_count,
    reason = excluded.reason,
    stack_trace = excluded.stack_trace,
    failed_at = excluded.failed_at
"""

_COLUMNS = (
    "id, message_id, sender, receiver, content, failed_at, "
    "retry_count, reason, stack_trace, status"
)


def _format_time(dt: datetime) -> str:
    return dt.isoformat(sep=" ", timespec="microseconds")


def _parse_time(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except (TypeError, ValueError):
        return datetime.min


def _role(value: str) -> RoleLike:
    try:
        return AgentRole(value)
    except ValueError:
        return value


def _encode_message(msg: Message) -> bytes:
    document: dict[str, Any] = {
        "message_id": msg.message_id,
        "sender": str(msg.sender),
        "receiver": str(msg.receiver),
        "message_type": int(msg.message_type),
        "content": msg.content,
        "priority": int(msg.priority),
        "timestamp": msg.timestamp.isoformat(),
    }
    if msg.context is not None:
        context: dict[str, Any] = {
            "trace_id": msg.context.trace_id,
            "span_id": msg.context.span_id,
            "start_time": msg.context.start_time.isoformat(),
        }
        if msg.context.parent_id:
            context["parent_id"] = msg.context.parent_id
        document["context"] = context
    if msg.idempotency_key:
        document["idempotency_key"] = msg.idempotency_key
    return json.dumps(document, default=str).encode("utf-8")


@dataclass
class DeadLetterMessage:
    """A message that ended up in the dead letter queue."""

    id: int
    message_id: str
    sender: RoleLike
    receiver: RoleLike
    content: bytes = b""
    failed_at: datetime = field(default_factory=datetime.now)
    retry_count: int = 0
    reason: str = ""
    stack_trace: str = ""
    status: str = "pending"


@dataclass
class DLQConfig:
    """Settings for a dead letter queue."""

    db_path: str = "./data/dlq.db"
    max_age: timedelta = timedelta(days=30)
    cleanup_interval: timedelta = timedelta(hours=24)
    alert_threshold: int = 100
    notify_buffer: int = 1000


class DeadLetterQueue:
    """Persists failed messages and announces new ones on a bounded queue."""

    def __init__(self, config: DLQConfig | None = None) -> None:
        self.config = config if config is not None else DLQConfig()
        self._lock = threading.Lock()
        self._db = sqlite3.connect(self.config.db_path, check_same_thread=False)
        try:
            self._db.executescript(_SCHEMA)
        except sqlite3.Error:
            self._db.close()
            raise
        self._notify: queue.Queue[DeadLetterMessage] = queue.Queue(
            maxsize=max(self.config.notify_buffer, 0)
        )
        self._stop = threading.Event()
        self._closed = False
        self._cleaner = threading.Thread(target=self._cleanup_loop, daemon=True)
        self._cleaner.start()

    def add(
        self,
        msg: Message,
        retry_count: int,
        reason: str,
        stack_trace: str = "",
    ) -> DeadLetterMessage:
        """Store a failed message, updating it if already present, and announce it."""
        content = _encode_message(msg)
        failed_at = datetime.now()
        with self._lock, self._db:
            self._db.execute(
                _UPSERT,
                (
                    msg.message_id,
                    str(msg.sender),
                    str(msg.receiver),
                    content,
                    _format_time(failed_at),
                    retry_count,
                    reason,
                    stack_trace,
                    "pending",
                ),
            )
            row = self._db.execute(
                "SELECT id FROM dead_letter_queue WHERE message_id = ?",
                (msg.message_id,),
            ).fetchone()
        entry = DeadLetterMessage(
            id=row[0],
            message_id=msg.message_id,
            sender=msg.sender,
            receiver=msg.receiver,
            failed_at=failed_at,
            retry_count=retry_count,
            reason=reason,
            stack_trace=stack_trace,
            status="pending",
        )
        try:
            self._notify.put_nowait(entry)
        except queue.Full:
            print("[DLQ] Warning: notify channel is full")
        return entry

    def _select(self, where: str, params: tuple[Any, ...]) -> list[DeadLetterMessage]:
        query = (
            f"SELECT {_COLUMNS} FROM dead_letter_queue WHERE {where} "
            "ORDER BY failed_at DESC LIMIT ?"
        )
        with self._lock:
            rows = self._db.execute(query, params).fetchall()
        return [
            DeadLetterMessage(
                id=row[0],
                message_id=row[1],
                sender=_role(row[2]),
                receiver=_role(row[3]),
                content=bytes(row[4]),
                failed_at=_parse_time(row[5]),
                retry_count=row[6],
                reason=row[7] or "",
                stack_trace=row[8] or "",
                status=row[9] or "",
            )
            for row in rows
        ]

    def pending(self, limit: int = 100) -> list[DeadLetterMessage]:
        """Return pending messages, newest failure first; a limit <= 0 means 100."""
        if limit <= 0:
            limit = 100
        return self._select("status = 'pending'", (limit,))

    def by_receiver(self, receiver: RoleLike, limit: int = 100) -> list[DeadLetterMessage]:
        """Return pending messages addressed to ``receiver``; a limit <= 0 means 100."""
        if limit <= 0:
            limit = 100
        return self._select("receiver = ? AND status = 'pending'", (str(receiver), limit))

    def _set_status(self, message_id: str, status: str) -> None:
        with self._lock, self._db:
            self._db.execute(
                "UPDATE dead_letter_queue SET status = ? WHERE message_id = ?",
                (status, message_id),
            )

    def mark_retried(self, message_id: str) -> None:
        """Mark a message as retried."""
        self._set_status(message_id, "retried")

    def mark_archived(self, message_id: str) -> None:
        """Mark a message as archived."""
        self._set_status(message_id, "archived")

    def delete(self, message_id: str) -> None:
        """Remove a message."""
        with self._lock, self._db:
            self._db.execute(
                "DELETE FROM dead_letter_queue WHERE message_id = ?", (message_id,)
            )

    def remove_expired(self) -> int:
        """Delete messages that failed longer ago than ``max_age``; return how many."""
        cutoff = datetime.now() - self.config.max_age
        with self._lock, self._db:
            cursor = self._db.execute(
                "DELETE FROM dead_letter_queue WHERE failed_at < ?",
                (_format_time(cutoff),),
            )
            return cursor.rowcount

    def stats(self) -> dict[str, int]:
        """Return the number of messages per status."""
        with self._lock:
            rows = self._db.execute(
                "SELECT status, COUNT(*) FROM dead_letter_queue GROUP BY status"
            ).fetchall()
        return {status: count for status, count in rows}

    def total_count(self) -> int:
        """Return the number of stored messages."""
        with self._lock:
            return self._db.execute("SELECT COUNT(*) FROM dead_letter_queue").fetchone()[0]

    def notifications(self) -> queue.Queue[DeadLetterMessage]:
        """Return the queue on which newly added messages are announced."""
        return self._notify

    def should_alert(self) -> bool:
        """Return whether the stored count has reached the alert threshold."""
        try:
            return self.total_count() >= self.config.alert_threshold
        except sqlite3.Error:
            return False

    def _cleanup_loop(self) -> None:
        interval = max(self.config.cleanup_interval.total_seconds(), 0.001)
        while not self._stop.wait(interval):
            try:
                self.remove_expired()
            except sqlite3.Error as exc:
                print(f"[DLQ] Failed to cleanup: {exc}")

    def close(self) -> None:
        """Stop the cleanup thread and close the database."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        self._cleaner.join()
        with self._lock:
            self._db.close()

    def __enter__(self) -> DeadLetterQueue:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()