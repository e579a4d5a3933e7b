"""The chief technology agent: architecture, technical reviews and incident response."""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import Any

from superman.agents.base import BaseAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

_TECH_STACK = ("Go", "PostgreSQL", "Redis", "Docker")
_INCIDENT_RESPONSES: dict[str, list[str]] = {
    "system_outage": [
        "Emergency deployment rollback",
        "Failover activation",
        "Stakeholder notification",
        "Root cause analysis",
    ],
    "performance_degradation": [
        "Performance monitoring",
        "Resource scaling",
        "Load balancing adjustment",
    ],
    "minor_issue": [
        "Log analysis",
        "Bug fix scheduling",
        "Documentation update",
    ],
}


def _float(content: dict[str, Any], key: str) -> float | None:
    value = content.get(key)
    return value if isinstance(value, float) else None


def _int(content: dict[str, Any], key: str) -> int | None:
    value = content.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _str(content: dict[str, Any], key: str) -> str | None:
    value = content.get(key)
    return value if isinstance(value, str) else None


def _format_list(items: Any) -> str:
    return "[" + " ".join(str(item) for item in items) + "]"


class CTOAgent(BaseAgent):
    """Reviews technical reports, designs architecture and responds to incidents."""

    def __init__(self) -> None:
        super().__init__(
            AgentRole.CTO,
            ["系统架构", "技术研发", "团队管理", "技术选型", "系统安全"],
            2,
        )

    def process_message(self, msg: Message) -> None:
        """Record ``msg`` and act on reports, task assignments, approvals and alerts."""
        with self._lock:
            self.messages.append(msg)
            self.last_active = datetime.now()
            if msg.message_type == MessageType.STATUS_REPORT:
                self._handle_status_report(msg)
            elif msg.message_type == MessageType.TASK_ASSIGNMENT:
                self._handle_task_assignment(msg)
            elif msg.message_type == MessageType.APPROVAL_REQUEST:
                self._handle_approval_request(msg)
            elif msg.message_type == MessageType.ALERT:
                self._handle_alert(msg)

    def _handle_status_report(self, msg: Message) -> None:
        content = msg.content or {}
        report = _str(content, "report_type")
        if report is None:
            return
        print(f"[CTO] Received {report} status report from {msg.sender}")
        analyzers = {
            "system_performance": self._analyze_system_performance,
            "development": self._analyze_development_metrics,
            "security": self._analyze_security_report,
            "infrastructure": self._analyze_infrastructure_report,
        }
        analyzer = analyzers.get(report)
        if analyzer is not None:
            analyzer(content)

    def _handle_task_assignment(self, msg: Message) -> None:
        content = msg.content or {}
        task_data = content.get("task")
        if not isinstance(task_data, dict):
            return
        print(f"[CTO] Assigning technical task: {task_data.get('title')}")
        architecture = self.design_architecture(task_data)
        self._plan_technical_implementation(task_data, architecture)

    def _handle_approval_request(self, msg: Message) -> None:
        content = msg.content or {}
        request_type = _str(content, "request_type")
        if request_type is None:
            return
        print(f"[CTO] Approval request for: {request_type}")
        approved = self.review_technical_proposal(content, request_type)
        self._provide_technical_feedback(content, approved)

    def _handle_alert(self, msg: Message) -> None:
        content = msg.content or {}
        severity = _str(content, "severity")
        if severity is None:
            return
        print(f"[CTO] Technical alert (severity: {severity}): {content.get('description')}")
        incident = self.classify_incident(content)
        self._initiate_technical_response(content, incident)

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
                    "executive_summary": f"Technical task '{task.title}' completed by CTO",
                    "technical_details": "Implementation and deployment complete",
                },
                priority=task.priority,
                timestamp=now,
                message_id=str(uuid.uuid4()),
            )
            self.messages.append(response)
            return response

    def _analyze_system_performance(self, content: dict[str, Any]) -> None:
        response_time = _float(content, "response_time")
        if response_time is not None:
            if response_time < 100:
                print(
                    f"[CTO] Excellent system performance: {response_time:.2f}ms "
                    "- Maintain optimization"
                )
            else:
                print(
                    f"[CTO] Performance optimization needed: {response_time:.2f}ms "
                    "- Implement caching strategies"
                )

        throughput = _float(content, "throughput")
        if throughput is not None:
            print(
                f"[CTO] System throughput: {throughput:.2f} req/s "
                "- Scale architecture if needed"
            )

    def _analyze_development_metrics(self, content: dict[str, Any]) -> None:
        deploy_freq = _float(content, "deploy_frequency")
        if deploy_freq is not None:
            if deploy_freq > 10:
                print(
                    f"[CTO] High deployment frequency: {deploy_freq:.1f}/week - Excellent CI/CD"
                )
            else:
                print(
                    f"[CTO] Improve deployment pipeline: {deploy_freq:.1f}/week - Automate more"
                )

        bug_rate = _float(content, "bug_rate")
        if bug_rate is not None:
            if bug_rate < 0.05:
                print(
                    f"[CTO] Low bug rate: {bug_rate * 100:.2f}% "
                    "- Quality engineering effective"
                )
            else:
                print(
                    f"[CTO] Bug rate improvement needed: {bug_rate * 100:.2f}% - Enhance testing"
                )

    def _analyze_security_report(self, content: dict[str, Any]) -> None:
        vulnerabilities = _int(content, "vulnerabilities")
        if vulnerabilities is None:
            return
        if vulnerabilities == 0:
            print("[CTO] No security vulnerabilities - Excellent security posture")
        else:
            print(
                f"[CTO] {vulnerabilities} security vulnerabilities found "
                "- Immediate patching required"
            )

    def _analyze_infrastructure_report(self, content: dict[str, Any]) -> None:
        cpu_usage = _float(content, "cpu_usage")
        if cpu_usage is None:
            return
        if cpu_usage > 80:
            print(f"[CTO] High CPU usage: {cpu_usage:.1f}% - Scale horizontally")
        else:
            print(f"[CTO] CPU usage optimal: {cpu_usage:.1f}% - Current capacity sufficient")

    def design_architecture(self, task_data: dict[str, Any]) -> str:
        """Map a task's complexity to an architecture style."""
        architectures = {
            "high": "microservices_architecture",
            "medium": "modular_monolith",
        }
        complexity = _str(task_data, "complexity")
        if complexity is None:
            return "simple_monolith"
        return architectures.get(complexity, "simple_monolith")

    def _plan_technical_implementation(
        self, task_data: dict[str, Any], architecture: str
    ) -> None:
        estimated_hours = random.randrange(200) + 50
        print(
            f"[CTO] Technical plan - Architecture: {architecture}, "
            f"Stack: {_format_list(_TECH_STACK)}, Effort: {estimated_hours} hours"
        )

    def review_technical_proposal(self, content: dict[str, Any], request_type: str) -> bool:
        """Approve unless a float ``feasibility`` of 0.7 or less is given."""
        feasibility = _float(content, "feasibility")
        if feasibility is None:
            return True
        return feasibility > 0.7

    def _provide_technical_feedback(self, content: dict[str, Any], approved: bool) -> None:
        if approved:
            print("[CTO] Technical proposal approved - Proceed with implementation")
        else:
            print("[CTO] Technical proposal rejected - Requires architectural revision")

    def classify_incident(self, content: dict[str, Any]) -> str:
        """Map an alert's severity to an incident class."""
        incidents = {
            "critical": "system_outage",
            "high": "performance_degradation",
        }
        severity = _str(content, "severity")
        if severity is None:
            return "minor_issue"
        return incidents.get(severity, "minor_issue")

    def _initiate_technical_response(self, content: dict[str, Any], incident: str) -> None:
        responses = _INCIDENT_RESPONSES.get(incident)
        if responses is not None:
            print(f"[CTO] Technical response ({incident}): {_format_list(responses)}")