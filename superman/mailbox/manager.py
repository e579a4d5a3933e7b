"""Owns every agent's mailbox together with the shared dead letter queue and metrics."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from superman.agents.models import MessageType, Priority, RoleLike
from superman.mailbox.dead_letter import DeadLetterQueue, DLQConfig
from superman.mailbox.idempotency import IdempotencyChecker
from superman.mailbox.mailbox import (
    Mailbox,
    MailboxConfig,
    MailboxError,
    MessageHandler,
    default_mailbox_config,
)
from superman.mailbox.message import Message, new_message
from superman.mailbox.metrics import Metrics


@dataclass
class MailboxManagerConfig:
    """Settings for a mailbox manager; ``idempotency_window`` is in hours."""

    dlq_config: DLQConfig = field(default_factory=DLQConfig)
    idempotency_max_size: int = 100_000
    idempotency_window: int = 24
    enable_metrics: bool = True
    enable_dlq: bool = True
    default_mailbox_config: MailboxConfig | None = None


def default_mailbox_manager_config() -> MailboxManagerConfig:
    """Return the default manager settings."""
    return MailboxManagerConfig()


class MailboxManager:
    """Registers, starts, stops and routes messages to agents' mailboxes."""

    def __init__(self, config: MailboxManagerConfig | None = None) -> None:
        self.config = config if config is not None else default_mailbox_manager_config()
        self.dlq: DeadLetterQueue | None = None
        if self.config.enable_dlq:
            try:
                self.dlq = DeadLetterQueue(self.config.dlq_config)
            except Exception as exc:
                raise MailboxError(f"failed to create DLQ: {exc}") from exc
        self.idempotency_checker = IdempotencyChecker(
            self.config.idempotency_max_size,
            timedelta(hours=self.config.idempotency_window),
        )
        self.metrics: Metrics | None = Metrics() if self.config.enable_metrics else None
        self._mailboxes: dict[RoleLike, Mailbox] = {}
        self._lock = threading.RLock()
        self._started = False

    def register_mailbox(self, role: RoleLike, handler: MessageHandler) -> Mailbox:
        """Create a mailbox for ``role`` with ``handler``; raise if one exists."""
        with self._lock:
            if role in self._mailboxes:
                raise MailboxError(f"mailbox for role {role} already exists")
            template = self.config.default_mailbox_config
            if template is not None:
                mailbox_config = dataclasses.replace(
                    template,
                    receiver=role,
                    processing_timeout=dict(template.processing_timeout),
                )
            else:
                mailbox_config = default_mailbox_config(role)
            mailbox = Mailbox(mailbox_config, self.idempotency_checker, self.dlq, self.metrics)
            mailbox.set_handler(handler)
            self._mailboxes[role] = mailbox
            return mailbox

    def get_mailbox(self, role: RoleLike) -> Mailbox:
        """Return the mailbox for ``role``; raise MailboxError if there is none."""
        with self._lock:
            try:
                return self._mailboxes[role]
            except KeyError:
                raise MailboxError(f"mailbox for role {role} not found") from None

    def start(self) -> None:
        """Start every registered mailbox."""
        with self._lock:
            if self._started:
                raise MailboxError("mailbox manager already started")
            for role, mailbox in self._mailboxes.items():
                try:
                    mailbox.start()
                except MailboxError as exc:
                    raise MailboxError(f"failed to start mailbox for {role}: {exc}") from exc
            self._started = True

    def stop(self) -> None:
        """Stop every mailbox and close the dead letter queue; a no-op if not started."""
        with self._lock:
            if not self._started:
                return
            errors: list[str] = []
            for role, mailbox in self._mailboxes.items():
                try:
                    mailbox.stop()
                except Exception as exc:
                    errors.append(f"failed to stop mailbox for {role}: {exc}")
            if self.dlq is not None:
                try:
                    self.dlq.close()
                except Exception as exc:
                    errors.append(f"failed to close DLQ: {exc}")
            self._started = False
            if errors:
                raise MailboxError(f"errors during stop: {errors}")

    def send(self, msg: Message | None) -> None:
        """Deliver ``msg`` to its receiver's mailbox."""
        if msg is None:
            raise MailboxError("message is nil")
        self.get_mailbox(msg.receiver).send(msg)

    def send_to(
        self,
        sender: RoleLike,
        receiver: RoleLike,
        message_type: MessageType,
        content: dict[str, Any] | None,
        priority: Priority,
    ) -> Message:
        """Build a message and deliver it; return the message sent."""
        msg = new_message(sender, receiver, message_type, content).with_priority(priority)
        self.send(msg)
        return msg

    def all_stats(self) -> dict[str, Any]:
        """Return per-mailbox stats and, when enabled, DLQ counts and metrics."""
        with self._lock:
            stats: dict[str, Any] = {
                "mailboxes": {
                    str(role): mailbox.stats() for role, mailbox in self._mailboxes.items()
                }
            }
            if self.dlq is not None:
                try:
                    stats["dlq"] = self.dlq.stats()
                except Exception:
                    stats["dlq"] = {}
            if self.metrics is not None:
                stats["metrics"] = self.metrics.snapshot()
            return stats

    def is_started(self) -> bool:
        """Return whether the manager is running."""
        with self._lock:
            return self._started