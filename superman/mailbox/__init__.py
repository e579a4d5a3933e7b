"""Mailbox delivery: messages, priority queue, idempotency, metrics and dead letters."""

__all__ = [
    "dead_letter",
    "idempotency",
    "mailbox",
    "manager",
    "message",
    "metrics",
    "priority_queue",
]