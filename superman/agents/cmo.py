"""The chief marketing agent: campaigns, brand and market analysis."""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import Any

from superman.agents.base import BaseAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

_RESEARCH_METHODS = ("Surveys", "Focus groups", "Market research reports", "Social listening")
_COMPETITORS = ("Competitor A", "Competitor B", "Competitor C")
_ANALYSES = ("Pricing analysis", "Feature comparison", "Marketing tactics", "Market positioning")


def _float(content: dict[str, Any], key: str) -> float | None:
    value = content.get(key)
    return value if isinstance(value, float) else None


def _str(content: dict[str, Any], key: str) -> str | None:
    value = content.get(key)
    return value if isinstance(value, str) else None


class CMOAgent(BaseAgent):
    """Reviews marketing reports, plans campaigns and studies the market."""

    def __init__(self) -> None:
        super().__init__(
            AgentRole.CMO,
            ["市场策略", "品牌管理", "营销活动", "渠道运营", "ROI分析"],
            2,
        )

    def process_message(self, msg: Message) -> None:
        """Record ``msg`` and act on status reports, task assignments and data requests."""
        with self._lock:
            self.messages.append(msg)
            self.last_active = datetime.now()
            if msg.message_type == MessageType.STATUS_REPORT:
                self._handle_status_report(msg)
            elif msg.message_type == MessageType.TASK_ASSIGNMENT:
                self._handle_task_assignment(msg)
            elif msg.message_type == MessageType.DATA_REQUEST:
                self._handle_data_request(msg)

    def _handle_status_report(self, msg: Message) -> None:
        content = msg.content or {}
        report = _str(content, "report_type")
        if report is None:
            return
        print(f"[CMO] Received {report} status report from {msg.sender}")
        analyzers = {
            "campaign_performance": self._analyze_campaign_performance,
            "brand_metrics": self._analyze_brand_metrics,
            "customer_acquisition": self._analyze_customer_acquisition,
            "market_position": self._analyze_market_position,
        }
        analyzer = analyzers.get(report)
        if analyzer is not None:
            analyzer(content)

    def _handle_task_assignment(self, msg: Message) -> None:
        content = msg.content or {}
        task_data = content.get("task")
        if not isinstance(task_data, dict):
            return
        print(f"[CMO] Assigning marketing task: {task_data.get('title')}")
        strategy = self.develop_marketing_strategy(task_data)
        self._plan_campaign_execution(task_data, strategy)

    def _handle_data_request(self, msg: Message) -> None:
        content = msg.content or {}
        data_type = _str(content, "data_type")
        if data_type is None:
            return
        print(f"[CMO] Requesting marketing data: {data_type}")
        self._conduct_market_analysis(content, data_type)
        self._perform_competitive_intelligence(content, data_type)

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
                    "executive_summary": f"Marketing task '{task.title}' completed by CMO",
                    "campaign_metrics": "Marketing performance data analyzed",
                },
                priority=task.priority,
                timestamp=now,
                message_id=str(uuid.uuid4()),
            )
            self.messages.append(response)
            return response

    def _analyze_campaign_performance(self, content: dict[str, Any]) -> None:
        roi = _float(content, "roi")
        if roi is not None:
            if roi > 3.0:
                print(f"[CMO] Excellent campaign ROI: {roi:.2f}x - Scale successful campaigns")
            elif roi > 1.5:
                print(f"[CMO] Good campaign ROI: {roi:.2f}x - Optimize and expand")
            else:
                print(f"[CMO] Campaign ROI improvement needed: {roi:.2f}x - Reassess strategy")

        conversion = _float(content, "conversion_rate")
        if conversion is not None:
            print(
                f"[CMO] Campaign conversion rate: {conversion * 100:.2f}% "
                "- A/B test for improvement"
            )

    def _analyze_brand_metrics(self, content: dict[str, Any]) -> None:
        awareness = _float(content, "brand_awareness")
        if awareness is not None:
            if awareness > 0.7:
                print(
                    f"[CMO] Strong brand awareness: {awareness * 100:.1f}% "
                    "- Maintain brand consistency"
                )
            else:
                print(
                    f"[CMO] Brand awareness opportunity: {awareness * 100:.1f}% "
                    "- Increase brand visibility"
                )

        sentiment = _float(content, "brand_sentiment")
        if sentiment is not None:
            if sentiment > 0.8:
                print(
                    f"[CMO] Positive brand sentiment: {sentiment * 100:.1f}% - Leverage advocacy"
                )
            else:
                print(
                    f"[CMO] Brand sentiment improvement: {sentiment * 100:.1f}% "
                    "- Address negative perceptions"
                )

    def _analyze_customer_acquisition(self, content: dict[str, Any]) -> None:
        cac = _float(content, "customer_acquisition_cost")
        if cac is not None:
            if cac < 100:
                print(f"[CMO] Efficient CAC: ${cac:.2f} - Scale acquisition channels")
            else:
                print(f"[CMO] CAC optimization needed: ${cac:.2f} - Improve funnel efficiency")

        ltv = _float(content, "lifetime_value")
        if ltv is not None:
            print(f"[CMO] Customer LTV: ${ltv:.2f} - Focus on retention strategies")

    def _analyze_market_position(self, content: dict[str, Any]) -> None:
        share = _float(content, "market_share")
        if share is None:
            return
        if share > 0.3:
            print(f"[CMO] Market leadership: {share * 100:.1f}% - Defend market position")
        else:
            print(
                f"[CMO] Market share growth: {share * 100:.1f}% - Aggressive acquisition strategy"
            )

    def develop_marketing_strategy(self, task_data: dict[str, Any]) -> str:
        """Map a task's target audience to a marketing strategy."""
        strategies = {
            "enterprise": "account_based_marketing",
            "consumer": "digital_first_marketing",
        }
        target = _str(task_data, "target_audience")
        if target is None:
            return "integrated_marketing"
        return strategies.get(target, "integrated_marketing")

    def _plan_campaign_execution(self, task_data: dict[str, Any], strategy: str) -> None:
        budget = random.random() * 100000 + 10000
        duration = random.randrange(90) + 30
        print(
            f"[CMO] Campaign plan - Strategy: {strategy}, "
            f"Budget: ${budget:.2f}, Duration: {duration} days"
        )

    def _conduct_market_analysis(self, content: dict[str, Any], data_type: str) -> None:
        sample_size = random.randrange(1000) + 200
        method = _RESEARCH_METHODS[random.randrange(len(_RESEARCH_METHODS))]
        print(f"[CMO] Market analysis - Method: {method}, Sample: {sample_size} respondents")

    def _perform_competitive_intelligence(self, content: dict[str, Any], data_type: str) -> None:
        analysis = _ANALYSES[random.randrange(len(_ANALYSES)) + 1]
        print(
            f"[CMO] Competitive intelligence - Tracking {len(_COMPETITORS)} competitors, "
            f"Analysis: {analysis}"
        )