"""The chief product agent: product strategy, user research and feature priorities."""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import Any

from superman.agents.base import BaseAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

_FEATURES = ("Core functionality", "User experience", "Performance", "Security")
_RESEARCH_METHODS = ("User interviews", "Surveys", "Usability testing", "A/B testing")
_INSIGHTS = (
    "Users prefer simplified workflows",
    "Mobile experience needs improvement",
    "Integration requests increasing",
    "Price sensitivity detected",
)


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


class CPOAgent(BaseAgent):
    """Reviews product reports, sets product strategy and studies users."""

    def __init__(self) -> None:
        super().__init__(
            AgentRole.CPO,
            ["产品规划", "需求分析", "用户研究", "产品设计", "迭代管理"],
            2,
        )

    def process_message(self, msg: Message) -> None:
        """Record ``msg`` and act on reports, task assignments, data requests and alerts."""
        with self._lock:
            self.messages.append(msg)
            self.last_active = datetime.now()
            if msg.message_type == MessageType.STATUS_REPORT:
                self._handle_status_report(msg)
            elif msg.message_type == MessageType.TASK_ASSIGNMENT:
                self._handle_task_assignment(msg)
            elif msg.message_type == MessageType.DATA_REQUEST:
                self._handle_data_request(msg)
            elif msg.message_type == MessageType.ALERT:
                self._handle_alert(msg)

    def _handle_status_report(self, msg: Message) -> None:
        content = msg.content or {}
        report = _str(content, "report_type")
        if report is None:
            return
        print(f"[CPO] Received {report} status report from {msg.sender}")
        analyzers = {
            "user_feedback": self._analyze_user_feedback,
            "product_metrics": self._analyze_product_metrics,
            "market_research": self._analyze_market_research,
            "usability": self._analyze_usability_report,
        }
        analyzer = analyzers.get(report)
        if analyzer is not None:
            analyzer(content)

    def _handle_task_assignment(self, msg: Message) -> None:
        content = msg.content or {}
        task_data = content.get("task")
        if not isinstance(task_data, dict):
            return
        print(f"[CPO] Assigning product task: {task_data.get('title')}")
        strategy = self.define_product_strategy(task_data)
        self._prioritize_features(task_data, strategy)

    def _handle_data_request(self, msg: Message) -> None:
        content = msg.content or {}
        data_type = _str(content, "data_type")
        if data_type is None:
            return
        print(f"[CPO] Requesting product data: {data_type}")
        self._conduct_user_research(content, data_type)
        self._generate_product_insights(content, data_type)

    def _handle_alert(self, msg: Message) -> None:
        content = msg.content or {}
        severity = _str(content, "severity")
        if severity is None:
            return
        print(f"[CPO] Product alert (severity: {severity}): {content.get('description')}")

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
                    "executive_summary": f"Product task '{task.title}' completed by CPO",
                    "product_impact": "Product roadmap advancement confirmed",
                },
                priority=task.priority,
                timestamp=now,
                message_id=str(uuid.uuid4()),
            )
            self.messages.append(response)
            return response

    def _analyze_user_feedback(self, content: dict[str, Any]) -> None:
        satisfaction = _float(content, "satisfaction_score")
        if satisfaction is not None:
            if satisfaction > 4.5:
                print(
                    f"[CPO] Excellent user satisfaction: {satisfaction:.1f}/5 "
                    "- Scale successful features"
                )
            elif satisfaction > 3.5:
                print(
                    f"[CPO] Good user satisfaction: {satisfaction:.1f}/5 "
                    "- Incremental improvements needed"
                )
            else:
                print(
                    f"[CPO] User satisfaction concerns: {satisfaction:.1f}/5 "
                    "- Major UX overhaul required"
                )

        feedback_count = _int(content, "feedback_count")
        if feedback_count is not None:
            print(
                f"[CPO] User engagement: {feedback_count} feedback responses - Analyze trends"
            )

    def _analyze_product_metrics(self, content: dict[str, Any]) -> None:
        adoption = _float(content, "adoption_rate")
        if adoption is not None:
            if adoption > 0.7:
                print(
                    f"[CPO] Strong product adoption: {adoption * 100:.1f}% - Focus on retention"
                )
            else:
                print(
                    f"[CPO] Product adoption opportunity: {adoption * 100:.1f}% "
                    "- Enhance onboarding"
                )

        retention = _float(content, "retention_rate")
        if retention is not None:
            if retention > 0.8:
                print(f"[CPO] Excellent retention: {retention * 100:.1f}% - Maintain quality")
            else:
                print(
                    f"[CPO] Retention improvement needed: {retention * 100:.1f}% "
                    "- Add value features"
                )

    def _analyze_market_research(self, content: dict[str, Any]) -> None:
        market_size = _float(content, "market_size")
        if market_size is not None:
            print(
                f"[CPO] Market opportunity: ${market_size:.2f}M - Validate product-market fit"
            )

        competitor_count = _int(content, "competitor_count")
        if competitor_count is not None:
            if competitor_count > 5:
                print(
                    f"[CPO] Competitive market: {competitor_count} competitors "
                    "- Differentiate strongly"
                )
            else:
                print(
                    f"[CPO] Market opportunity: {competitor_count} competitors "
                    "- First-mover advantage"
                )

    def _analyze_usability_report(self, content: dict[str, Any]) -> None:
        completion = _float(content, "task_completion_rate")
        if completion is None:
            return
        if completion > 0.9:
            print(
                f"[CPO] Excellent usability: {completion * 100:.1f}% completion "
                "- Intuitive design"
            )
        else:
            print(
                f"[CPO] Usability improvements needed: {completion * 100:.1f}% completion "
                "- Simplify workflows"
            )

    def define_product_strategy(self, task_data: dict[str, Any]) -> str:
        """Map a task's market position to a product strategy."""
        strategies = {
            "emerging": "innovation_first",
            "mature": "optimization_focused",
        }
        market = _str(task_data, "market_position")
        if market is None:
            return "balanced_growth"
        return strategies.get(market, "balanced_growth")

    def _prioritize_features(self, task_data: dict[str, Any], strategy: str) -> None:
        priority = random.sample(range(len(_FEATURES)), len(_FEATURES))
        print(
            f"[CPO] Feature prioritization - Strategy: {strategy}, "
            f"Priority order: {_format_list(priority)}"
        )

    def _conduct_user_research(self, content: dict[str, Any], data_type: str) -> None:
        sample_size = random.randrange(500) + 100
        method = _RESEARCH_METHODS[random.randrange(len(_RESEARCH_METHODS))]
        print(f"[CPO] User research - Method: {method}, Sample size: {sample_size} users")

    def _generate_product_insights(self, content: dict[str, Any], data_type: str) -> None:
        selected = _INSIGHTS[random.randrange(len(_INSIGHTS)) + 1 :]
        print(f"[CPO] Product insights: {_format_list(selected)}")