"""Messages carried by the mailbox system."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from superman.agents.models import MessageType, Priority, RoleLike

_ID_CHARSET = "abcdefghijklmnopqrstuvwxyz0123456789"


@dataclass
class MessageContext:
    """Tracing context attached to a message."""

    trace_id: str
    span_id: str
    parent_id: str = ""
    start_time: datetime = field(default_factory=datetime.now)


def _generate_message_id() -> str:
    """Build a time-ordered ID: local timestamp with nanoseconds plus a random suffix."""
    ns = time.time_ns()
    seconds, fraction = divmod(ns, 1_000_000_000)
    stamp = time.strftime("%Y%m%d%H%M%S", time.localtime(seconds))
    suffix = "".join(random.choices(_ID_CHARSET, k=8))
    return f"{stamp}.{fraction:09d}{suffix}"


@dataclass
class Message:
    """A message queued in an agent's mailbox."""

    sender: RoleLike
    receiver: RoleLike
    message_type: MessageType
    content: dict[str, Any] | None = None
    priority: Priority = Priority.MEDIUM
    timestamp: datetime = field(default_factory=datetime.now)
    message_id: str = field(default_factory=_generate_message_id)
    context: MessageContext | None = None
    idempotency_key: str = ""

    def with_priority(self, priority: Priority) -> Message:
        """Set the priority and return the message."""
        self.priority = priority
        return self

    def with_context(self, context: MessageContext) -> Message:
        """Set the tracing context and return the message."""
        self.context = context
        return self

    def with_idempotency_key(self, key: str) -> Message:
        """Set the idempotency key and return the message."""
        self.idempotency_key = key
        return self


def new_message(
    sender: RoleLike,
    receiver: RoleLike,
    message_type: MessageType,
    content: dict[str, Any] | None,
) -> Message:
    """Create a medium-priority message with a fresh ID and timestamp."""
    return Message(
        sender=sender,
        receiver=receiver,
        message_type=message_type,
        content=content,
    )