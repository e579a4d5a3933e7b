"""Coordinates agents, the company state and the mailbox system."""

from __future__ import annotations

from typing import Any

from superman.agents.models import Message, MessageType, Priority, RoleLike, Task
from superman.mailbox.mailbox import MailboxError
from superman.mailbox.manager import MailboxManager
from superman.mailbox.message import Message as MailboxMessage
from superman.mailbox.message import new_message
from superman.workflow.router import MessageRouter
from superman.workflow.state_manager import StateManager


class OrchestratorError(Exception):
    """Raised when a task or message cannot be dispatched."""


class Orchestrator:
    """Holds the registered agents and dispatches work through their mailboxes."""

    def __init__(
        self,
        state_manager: StateManager,
        router: MessageRouter,
        mailbox_manager: MailboxManager,
    ) -> None:
        self.state_manager = state_manager
        self.router = router
        self.mailbox_manager = mailbox_manager
        self._agents: dict[RoleLike, Any] = {}

    def register_agent(self, role: RoleLike, agent: Any) -> None:
        """Register ``agent`` under ``role``, replacing any earlier one."""
        self._agents[role] = agent

    def get_agent(self, role: RoleLike) -> Any:
        """Return the agent registered under ``role``, or None."""
        return self._agents.get(role)

    def all_agents(self) -> list[Any]:
        """Return every registered agent."""
        return list(self._agents.values())

    def run_task(self, task: Task) -> None:
        """Send ``task`` to its assignee's mailbox and record it in the state."""
        receiver = task.assigned_to
        if receiver not in self._agents:
            raise OrchestratorError(f"agent {receiver} not found")
        content: dict[str, Any] = {
            "task_id": task.task_id,
            "title": task.title,
            "description": task.description,
            "assigned_by": task.assigned_by,
            "priority": task.priority,
            "status": task.status,
            "dependencies": task.dependencies,
            "deliverables": task.deliverables,
            "deadline": task.deadline,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
            "metadata": task.metadata,
        }
        try:
            self.mailbox_manager.send_to(
                task.assigned_by,
                receiver,
                MessageType.TASK_ASSIGNMENT,
                content,
                Priority(task.priority),
            )
        except MailboxError as exc:
            raise OrchestratorError(f"failed to send task via mailbox: {exc}") from exc
        self.state_manager.add_task(task)

    def send_message(self, msg: Message) -> MailboxMessage:
        """Deliver an agent message through the mailbox system; return what was sent."""
        mailbox_msg = new_message(
            msg.sender, msg.receiver, msg.message_type, dict(msg.content or {})
        ).with_priority(msg.priority)
        self.mailbox_manager.send(mailbox_msg)
        return mailbox_msg

    def send_message_to(
        self,
        sender: RoleLike,
        receiver: RoleLike,
        message_type: MessageType,
        content: dict[str, Any] | None,
        priority: Priority,
    ) -> MailboxMessage:
        """Build and deliver a message; return what was sent."""
        return self.mailbox_manager.send_to(sender, receiver, message_type, content, priority)

    def start(self) -> None:
        """Start the mailbox system."""
        try:
            self.mailbox_manager.start()
        except MailboxError as exc:
            raise OrchestratorError(f"failed to start mailbox manager: {exc}") from exc

    def stop(self) -> None:
        """Stop the mailbox system."""
        try:
            self.mailbox_manager.stop()
        except MailboxError as exc:
            raise OrchestratorError(f"failed to stop mailbox manager: {exc}") from exc