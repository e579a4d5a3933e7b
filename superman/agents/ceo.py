"""The chief executive agent: strategy, resource allocation and crisis handling."""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import Any

from superman.agents.base import BaseAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

_CRISIS_ACTIONS: dict[str, list[str]] = {
    "high_risk": [
        "Emergency board meeting",
        "Stakeholder communication",
        "Business continuity plan",
        "Media response strategy",
    ],
    "medium_risk": [
        "Department coordination",
        "Risk mitigation planning",
        "Progress monitoring",
    ],
    "low_risk": [
        "Standard monitoring",
        "Preventive measures",
    ],
}


def _format_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def _float(content: dict[str, Any], key: str) -> float | None:
    value = content.get(key)
    return value if isinstance(value, float) else None


def _str(content: dict[str, Any], key: str) -> str | None:
    value = content.get(key)
    return value if isinstance(value, str) else None


class CEOAgent(BaseAgent):
    """Top of the hierarchy; reads reports, weighs tasks and answers alerts."""

    def __init__(self) -> None:
        super().__init__(
            AgentRole.CEO,
            ["战略规划", "资源分配", "风险评估", "高层决策", "跨部门协调"],
            1,
        )

    def process_message(self, msg: Message) -> None:
        """Record ``msg`` and act on status reports, task assignments and alerts."""
        with self._lock:
            self.messages.append(msg)
            self.last_active = datetime.now()
            if msg.message_type == MessageType.STATUS_REPORT:
                self._handle_status_report(msg)
            elif msg.message_type == MessageType.TASK_ASSIGNMENT:
                self._handle_task_assignment(msg)
            elif msg.message_type == MessageType.ALERT:
                self._handle_alert(msg)

    def _handle_status_report(self, msg: Message) -> None:
        content = msg.content or {}
        report = _str(content, "report_type")
        if report is None:
            return
        print(f"[CEO] Received {report} status report from {msg.sender}")
        analyzers = {
            "financial": self._analyze_financial_report,
            "market": self._analyze_market_report,
            "product": self._analyze_product_report,
            "operational": self._analyze_operational_report,
        }
        analyzer = analyzers.get(report)
        if analyzer is not None:
            analyzer(content)

    def _handle_task_assignment(self, msg: Message) -> None:
        content = msg.content or {}
        task_data = content.get("task")
        if not isinstance(task_data, dict):
            return
        print(f"[CEO] Assigning strategic task: {task_data.get('title')}")
        strategy = self.evaluate_strategic_importance(task_data)
        self._allocate_resources(task_data, strategy)

    def _handle_alert(self, msg: Message) -> None:
        content = msg.content or {}
        severity = _str(content, "severity")
        if severity is None:
            return
        print(f"[CEO] Critical alert (severity: {severity}): {content.get('description')}")
        risk_level = self.assess_risk(content)
        self._initiate_crisis_management(content, risk_level)

    def generate_response(self, task: Task) -> Message:
        """Produce a completion report for ``task`` addressed to whoever assigned it."""
        with self._lock:
            now = datetime.now()
            response = Message(
                sender=self.role,
                receiver=task.assigned_by,
                message_type=MessageType.STATUS_REPORT,
                content={
                    "task_id": task.task_id,
                    "status": "completed",
                    "updated_at": now,
                    "executive_summary": f"Task '{task.title}' completed by CEO",
                    "results": "Strategic execution complete",
                },
                priority=task.priority,
                timestamp=now,
                message_id=str(uuid.uuid4()),
            )
            self.messages.append(response)
            return response

    def _analyze_financial_report(self, content: dict[str, Any]) -> None:
        revenue = _float(content, "revenue")
        if revenue is None:
            return
        if revenue > 1000000:
            print(f"[CEO] Strong revenue performance: ${revenue:.2f} - Consider expansion")
        else:
            print(
                f"[CEO] Revenue needs improvement: ${revenue:.2f} - Focus on growth strategies"
            )

    def _analyze_market_report(self, content: dict[str, Any]) -> None:
        share = _float(content, "market_share")
        if share is None:
            return
        if share > 0.25:
            print(
                f"[CEO] Market leader position: {share * 100:.1f}% "
                "- Maintain competitive advantage"
            )
        else:
            print(
                f"[CEO] Market share opportunity: {share * 100:.1f}% - Aggressive growth needed"
            )

    def _analyze_product_report(self, content: dict[str, Any]) -> None:
        satisfaction = _float(content, "user_satisfaction")
        if satisfaction is None:
            return
        if satisfaction > 4.5:
            print(
                f"[CEO] Excellent product satisfaction: {satisfaction:.1f}/5 - Scale success"
            )
        else:
            print(
                f"[CEO] Product improvement needed: {satisfaction:.1f}/5 "
                "- Prioritize UX enhancements"
            )

    def _analyze_operational_report(self, content: dict[str, Any]) -> None:
        efficiency = _float(content, "efficiency")
        if efficiency is None:
            return
        if efficiency > 0.85:
            print(
                f"[CEO] High operational efficiency: {efficiency * 100:.1f}% - Optimize further"
            )
        else:
            print(
                f"[CEO] Operational improvements needed: {efficiency * 100:.1f}% "
                "- Process optimization required"
            )

    def evaluate_strategic_importance(self, task_data: dict[str, Any]) -> str:
        """Map a task's priority string to an execution strategy."""
        strategies = {
            "critical": "immediate_execution",
            "high": "priority_allocation",
            "medium": "balanced_approach",
        }
        priority = _str(task_data, "priority")
        if priority is None:
            return "standard_processing"
        return strategies.get(priority, "standard_processing")

    def _allocate_resources(self, task_data: dict[str, Any], strategy: str) -> None:
        budget = random.random() * 1000000
        team_size = random.randrange(10) + 5
        print(
            f"[CEO] Resource allocation - Strategy: {strategy}, "
            f"Budget: ${budget:.2f}, Team: {team_size}"
        )

    def assess_risk(self, content: dict[str, Any]) -> str:
        """Map an alert's severity to a risk level."""
        levels = {"critical": "high_risk", "high": "medium_risk"}
        severity = _str(content, "severity")
        if severity is None:
            return "low_risk"
        return levels.get(severity, "low_risk")

    def _initiate_crisis_management(self, content: dict[str, Any], risk_level: str) -> None:
        actions = _CRISIS_ACTIONS.get(risk_level)
        if actions is not None:
            print(f"[CEO] Crisis management ({risk_level}): {_format_list(actions)}")