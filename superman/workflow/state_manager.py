"""Thread-safe access to the company state."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from superman.agents.models import (
    AgentRole,
    AgentState,
    CompanyState,
    Message,
    RoleLike,
    Task,
)


@dataclass
class AgentStatus:
    """A summary of one agent's load, as shown in a health report."""

    role: str
    task_count: int = 0
    completed_count: int = 0
    message_count: int = 0
    workload: float = 0.0


class StateManager:
    """Guards the company state and keeps an agent state for every role."""

    def __init__(self, initial_state: CompanyState) -> None:
        self._lock = threading.RLock()
        self._state = initial_state
        self._agents: dict[RoleLike, AgentState] = {}
        for role in AgentRole:
            self.create_agent_state(role)

    def create_agent_state(self, role: RoleLike) -> None:
        """Create an empty agent state for ``role`` unless one exists."""
        with self._lock:
            if role in self._agents:
                return
            agent_state = AgentState(role=role)
            self._agents[role] = agent_state
            self._state.agents[role] = agent_state

    def timestamp(self) -> datetime:
        """Return the company clock."""
        with self._lock:
            return self._state.current_time

    def state(self) -> CompanyState:
        """Return the shared company state itself, not a copy."""
        with self._lock:
            return self._state

    def add_message(self, msg: Message) -> None:
        """Append ``msg`` to the company message log."""
        with self._lock:
            self._state.messages.append(msg)

    def add_task(self, task: Task) -> None:
        """Store ``task`` under its ID, replacing any task with the same ID."""
        with self._lock:
            self._state.tasks[task.task_id] = task

    def health_report(self) -> dict[str, Any]:
        """Summarise agents, task and message counts and the clock."""
        with self._lock:
            agents = {
                str(role): AgentStatus(
                    role=str(role),
                    task_count=len(agent_state.current_tasks),
                    completed_count=len(agent_state.completed_tasks),
                    message_count=len(agent_state.messages),
                    workload=agent_state.workload,
                )
                for role, agent_state in self._state.agents.items()
            }
            return {
                "agents": agents,
                "total_tasks": len(self._state.tasks),
                "total_messages": len(self._state.messages),
                "current_time": self._state.current_time,
            }