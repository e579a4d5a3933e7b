"""Routing of agent messages and the table of who may receive each message type."""

from __future__ import annotations

from superman.agents.models import AgentRole, Message, MessageType, RoleLike

_ALL_ROLES = (
    AgentRole.CEO,
    AgentRole.CTO,
    AgentRole.CPO,
    AgentRole.CMO,
    AgentRole.CFO,
    AgentRole.HR,
    AgentRole.RD,
    AgentRole.DATA_ANALYST,
    AgentRole.CUSTOMER_SUPPORT,
    AgentRole.OPERATIONS,
)


def _all_except(excluded: AgentRole) -> list[RoleLike]:
    return [role for role in _ALL_ROLES if role is not excluded]


def _default_table() -> dict[MessageType, list[RoleLike]]:
    approval_request: list[RoleLike] = [AgentRole.CTO, AgentRole.CEO]
    approval_request += [r for r in _ALL_ROLES if r not in (AgentRole.CTO, AgentRole.CEO)]
    return {
        MessageType.STATUS_REPORT: _all_except(AgentRole.RD),
        MessageType.TASK_ASSIGNMENT: list(_ALL_ROLES),
        MessageType.DATA_REQUEST: [AgentRole.DATA_ANALYST],
        MessageType.DATA_RESPONSE: _all_except(AgentRole.DATA_ANALYST),
        MessageType.APPROVAL_REQUEST: approval_request,
        MessageType.APPROVAL_RESPONSE: list(_ALL_ROLES),
        MessageType.ALERT: list(_ALL_ROLES),
        MessageType.COLLABORATION: list(_ALL_ROLES),
    }


class MessageRouter:
    """Decides which agents a message goes to."""

    def __init__(self) -> None:
        self._table = _default_table()

    def route_message(self, msg: Message) -> list[RoleLike]:
        """Return the recipients of ``msg``: its receiver alone."""
        return [msg.receiver]

    def routing_table(self) -> dict[MessageType, list[RoleLike]]:
        """Return a copy of the roles eligible for each message type."""
        return {kind: list(roles) for kind, roles in self._table.items()}