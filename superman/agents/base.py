"""The behaviour shared by every company agent."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Callable, Iterable

from superman.agents.models import (
    AgentState,
    Message,
    MessageType,
    Priority,
    RoleLike,
    Task,
)


class BaseAgent:
    """An agent with a role, a message log and a list of tasks."""

    def __init__(self, role: RoleLike, capabilities: Iterable[str], hierarchy: int) -> None:
        self._lock = threading.RLock()
        self.role = role
        self.name = str(role)
        self.current_tasks: list[Task] = []
        self.completed_tasks: list[Task] = []
        self.messages: list[Message] = []
        self.performance_metrics: dict[str, float] = {}
        self.capabilities = list(capabilities)
        self.workload = 0.0
        self.last_active = datetime.now()
        self.role_hierarchy = hierarchy

    def _state(self) -> AgentState:
        return AgentState(
            role=self.role,
            current_tasks=self.current_tasks,
            completed_tasks=self.completed_tasks,
            messages=self.messages,
            performance_metrics=self.performance_metrics,
            capabilities=self.capabilities,
            workload=self.workload,
            last_active=self.last_active,
        )

    def snapshot(self) -> AgentState:
        """Return a copy of the agent's current state."""
        with self._lock:
            return AgentState(
                role=self.role,
                current_tasks=list(self.current_tasks),
                completed_tasks=list(self.completed_tasks),
                messages=list(self.messages),
                performance_metrics=dict(self.performance_metrics),
                capabilities=list(self.capabilities),
                workload=self.workload,
                last_active=self.last_active,
            )

    def update_state(self, updater: Callable[[AgentState], Any]) -> None:
        """Let ``updater`` modify the agent's state under the lock."""
        with self._lock:
            state = self._state()
            updater(state)
            self.current_tasks = state.current_tasks
            self.completed_tasks = state.completed_tasks
            self.messages = state.messages
            self.performance_metrics = state.performance_metrics
            self.capabilities = state.capabilities
            self.workload = state.workload
            self.last_active = state.last_active

    def process_message(self, msg: Message) -> None:
        """Record an incoming message and mark the agent active."""
        with self._lock:
            self.messages.append(msg)
            self.last_active = datetime.now()

    def generate_response(self, task: Task) -> Message:
        """Produce an in-progress status report for ``task``."""
        with self._lock:
            now = datetime.now()
            response = Message(
                sender=self.role,
                message_type=MessageType.STATUS_REPORT,
                content={
                    "task_id": task.task_id,
                    "status": "in_progress",
                    "updated_at": now,
                },
                priority=Priority.MEDIUM,
                timestamp=now,
                message_id="",
            )
            self.messages.append(response)
            return response

    def complete_task(self, task: Task) -> None:
        """Move ``task`` from the current tasks to the completed ones."""
        with self._lock:
            self.completed_tasks.append(task)
            for current in self.current_tasks:
                if current.task_id == task.task_id:
                    self.current_tasks.remove(current)
                    break
            self.workload = float(len(self.current_tasks))


def get_agent_name(agent: Any) -> str:
    """Return the name of an agent, or "unknown" for anything else."""
    if isinstance(agent, BaseAgent):
        return agent.name
    return "unknown"