"""Core data types shared by the agents: roles, priorities, messages, tasks and state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Union


class AgentRole(str, Enum):
    """The roles an agent can play in the company."""

    CEO = "ceo"
    CTO = "cto"
    CPO = "cpo"
    CMO = "cmo"
    CFO = "cfo"
    HR = "hr"
    RD = "rd"
    DATA_ANALYST = "data_analyst"
    CUSTOMER_SUPPORT = "customer_support"
    OPERATIONS = "operations"

    def __str__(self) -> str:
        return self.value


RoleLike = Union[AgentRole, str]


class Priority(IntEnum):
    """Message and task priority; a larger value is more urgent."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3

    def __str__(self) -> str:
        return self.name.lower()


class MessageType(IntEnum):
    """Kinds of messages exchanged between agents."""

    TASK_ASSIGNMENT = 0
    STATUS_REPORT = 1
    DATA_REQUEST = 2
    DATA_RESPONSE = 3
    APPROVAL_REQUEST = 4
    APPROVAL_RESPONSE = 5
    ALERT = 6
    COLLABORATION = 7

    def __str__(self) -> str:
        return self.name.lower()


def priority_name(value: int) -> str:
    """Return the lower-case name of a priority value, or "unknown"."""
    try:
        return str(Priority(value))
    except ValueError:
        return "unknown"


def message_type_name(value: int) -> str:
    """Return the lower-case name of a message type value, or "unknown"."""
    try:
        return str(MessageType(value))
    except ValueError:
        return "unknown"


@dataclass
class Message:
    """A message sent from one agent to another."""

    sender: RoleLike = ""
    receiver: RoleLike = ""
    message_type: MessageType = MessageType.TASK_ASSIGNMENT
    content: dict[str, Any] = field(default_factory=dict)
    priority: Priority = Priority.LOW
    timestamp: datetime = field(default_factory=datetime.now)
    message_id: str = ""


@dataclass
class Task:
    """A unit of work assigned to an agent."""

    task_id: str
    title: str = ""
    description: str = ""
    assigned_to: RoleLike = ""
    assigned_by: RoleLike = ""
    priority: Priority = Priority.LOW
    status: str = ""
    dependencies: list[str] = field(default_factory=list)
    deliverables: list[str] = field(default_factory=list)
    deadline: datetime | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AgentState:
    """The working state of a single agent."""

    role: RoleLike
    current_tasks: list[Task] = field(default_factory=list)
    completed_tasks: list[Task] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    performance_metrics: dict[str, float] = field(default_factory=dict)
    capabilities: list[str] = field(default_factory=list)
    workload: float = 0.0
    last_active: datetime = field(default_factory=datetime.now)


@dataclass
class CompanyState:
    """The shared state of the whole company."""

    agents: dict[RoleLike, AgentState] = field(default_factory=dict)
    tasks: dict[str, Task] = field(default_factory=dict)
    messages: list[Message] = field(default_factory=list)
    current_time: datetime = field(default_factory=datetime.now)
    strategic_goals: dict[str, Any] = field(default_factory=dict)
    kpis: dict[str, float] = field(default_factory=dict)
    market_data: dict[str, Any] = field(default_factory=dict)
    user_feedback: list[dict[str, Any]] = field(default_factory=list)
    system_health: dict[str, Any] = field(default_factory=dict)
    budget_allocation: dict[str, Any] = field(default_factory=dict)
    financial_metrics: dict[str, Any] = field(default_factory=dict)
    campaign_metrics: dict[str, Any] = field(default_factory=dict)
    product_backlog: list[dict[str, Any]] = field(default_factory=list)
    technical_debt: list[dict[str, Any]] = field(default_factory=list)
    campaign_data: dict[str, Any] = field(default_factory=dict)
    brand_data: dict[str, Any] = field(default_factory=dict)
    industry_reports: dict[str, Any] = field(default_factory=dict)
    historical_cashflow: dict[str, Any] = field(default_factory=dict)
    competitor_data: dict[str, Any] = field(default_factory=dict)
    customer_data: dict[str, Any] = field(default_factory=dict)
    product_data: dict[str, Any] = field(default_factory=dict)
    business_metrics: dict[str, Any] = field(default_factory=dict)
    historical_financials: dict[str, Any] = field(default_factory=dict)


def create_empty_state() -> CompanyState:
    """Return a company state with every collection empty and the clock set to now."""
    return CompanyState()