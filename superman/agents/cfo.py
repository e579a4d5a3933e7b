"""The chief financial agent: budgets, financial analysis and risk assessment."""

from __future__ import annotations

import math
import random
import uuid
from datetime import datetime
from typing import Any

from superman.agents.base import BaseAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

_SCENARIOS = ("Conservative", "Moderate", "Aggressive")
_GROWTH_RATES = (0.05, 0.15, 0.25)
_RISK_FACTORS = (
    "Market volatility",
    "Currency fluctuations",
    "Credit risk",
    "Liquidity risk",
    "Regulatory changes",
)
_DEPARTMENTS = ("Engineering", "Marketing", "Sales", "Operations", "Admin")


def _float(content: dict[str, Any], key: str) -> float | None:
    value = content.get(key)
    return value if isinstance(value, float) else None


def _str(content: dict[str, Any], key: str) -> str | None:
    value = content.get(key)
    return value if isinstance(value, str) else None


def _format_list(items: list[Any]) -> str:
    return "[" + " ".join(str(item) for item in items) + "]"


def _ratio(numerator: float, denominator: float) -> float:
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator)


class CFOAgent(BaseAgent):
    """Reviews financial reports, plans budgets and forecasts."""

    def __init__(self) -> None:
        super().__init__(
            AgentRole.CFO,
            ["财务管理", "预算编制", "财务分析", "成本控制", "风险评估"],
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
        print(f"[CFO] Received {report} status report from {msg.sender}")
        analyzers = {
            "revenue": self._analyze_revenue_report,
            "expenses": self._analyze_expense_report,
            "cashflow": self._analyze_cashflow_report,
            "profitability": self._analyze_profitability_report,
        }
        analyzer = analyzers.get(report)
        if analyzer is not None:
            analyzer(content)

    def _handle_task_assignment(self, msg: Message) -> None:
        content = msg.content or {}
        task_data = content.get("task")
        if not isinstance(task_data, dict):
            return
        print(f"[CFO] Assigning financial task: {task_data.get('title')}")
        budget = self.create_budget_plan(task_data)
        self._allocate_financial_resources(task_data, budget)

    def _handle_data_request(self, msg: Message) -> None:
        content = msg.content or {}
        data_type = _str(content, "data_type")
        if data_type is None:
            return
        print(f"[CFO] Requesting financial data: {data_type}")
        self._perform_financial_forecasting(content, data_type)
        self._conduct_risk_assessment(content, data_type)

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
                    "executive_summary": f"Financial task '{task.title}' completed by CFO",
                    "financial_impact": "Budget and financial analysis complete",
                },
                priority=task.priority,
                timestamp=now,
                message_id=str(uuid.uuid4()),
            )
            self.messages.append(response)
            return response

    def _analyze_revenue_report(self, content: dict[str, Any]) -> None:
        revenue = _float(content, "total_revenue")
        if revenue is not None:
            millions = revenue / 1000000
            if revenue > 10000000:
                print(
                    f"[CFO] Strong revenue performance: ${millions:.2f}M "
                    "- Consider investment opportunities"
                )
            elif revenue > 5000000:
                print(
                    f"[CFO] Solid revenue growth: ${millions:.2f}M - Maintain current strategy"
                )
            else:
                print(
                    f"[CFO] Revenue acceleration needed: ${millions:.2f}M "
                    "- Implement growth initiatives"
                )

        growth = _float(content, "growth_rate")
        if growth is not None:
            if growth > 0.2:
                print(
                    f"[CFO] Excellent revenue growth: {growth * 100:.1f}% "
                    "- Scale successful initiatives"
                )
            else:
                print(
                    f"[CFO] Revenue growth improvement: {growth * 100:.1f}% - Explore new markets"
                )

    def _analyze_expense_report(self, content: dict[str, Any]) -> None:
        expenses = _float(content, "total_expenses")
        revenue = _float(content, "total_revenue")
        if expenses is None or revenue is None:
            return
        ratio = _ratio(expenses, revenue)
        if ratio < 0.7:
            print(
                f"[CFO] Efficient expense management: {ratio * 100:.1f}% of revenue "
                "- Optimize further"
            )
        else:
            print(
                f"[CFO] Expense reduction needed: {ratio * 100:.1f}% of revenue "
                "- Implement cost controls"
            )

    def _analyze_cashflow_report(self, content: dict[str, Any]) -> None:
        cashflow = _float(content, "net_cashflow")
        if cashflow is None:
            return
        millions = cashflow / 1000000
        if cashflow > 1000000:
            print(
                f"[CFO] Positive cash flow: ${millions:.2f}M "
                "- Investment opportunities available"
            )
        elif cashflow > 0:
            print(
                f"[CFO] Healthy cash flow: ${millions:.2f}M - Maintain operational stability"
            )
        else:
            print(
                f"[CFO] Cash flow concerns: ${millions:.2f}M "
                "- Immediate liquidity management required"
            )

    def _analyze_profitability_report(self, content: dict[str, Any]) -> None:
        margin = _float(content, "profit_margin")
        if margin is None:
            return
        if margin > 0.2:
            print(
                f"[CFO] Strong profitability: {margin * 100:.1f}% margin "
                "- Sustainable growth model"
            )
        elif margin > 0.1:
            print(
                f"[CFO] Moderate profitability: {margin * 100:.1f}% margin "
                "- Optimization opportunities"
            )
        else:
            print(
                f"[CFO] Profitability improvement needed: {margin * 100:.1f}% margin "
                "- Strategic review required"
            )

    def create_budget_plan(self, task_data: dict[str, Any]) -> dict[str, float]:
        """Draw a random budget for each department and print the total."""
        budget = {
            "engineering": random.random() * 1000000 + 500000,
            "marketing": random.random() * 500000 + 200000,
            "sales": random.random() * 400000 + 150000,
            "operations": random.random() * 300000 + 100000,
            "admin": random.random() * 200000 + 50000,
        }
        total = sum(budget.values())
        print(f"[CFO] Budget plan created - Total: ${total / 1000000:.2f}M")
        return budget

    def _allocate_financial_resources(
        self, task_data: dict[str, Any], budget: dict[str, float]
    ) -> None:
        priority = random.sample(range(len(budget)), len(budget))
        print(f"[CFO] Resource allocation priority: {_format_list(priority)}")
        for index, dept in enumerate(_DEPARTMENTS):
            rank = priority[index] if index < len(priority) else 0
            print(f"[CFO] {dept}: Priority {rank}, Budget: ${budget.get(dept, 0.0):.2f}")

    def _perform_financial_forecasting(self, content: dict[str, Any], data_type: str) -> None:
        selected = random.randrange(len(_SCENARIOS))
        print(
            f"[CFO] Financial forecast - Scenario: {_SCENARIOS[selected]}, "
            f"Growth: {_GROWTH_RATES[selected] * 100:.1f}%"
        )

    def _conduct_risk_assessment(self, content: dict[str, Any], data_type: str) -> None:
        risk_level = random.random() * 0.3 + 0.1
        factor = _RISK_FACTORS[random.randrange(len(_RISK_FACTORS)) + 1]
        print(
            f"[CFO] Risk assessment - Overall risk: {risk_level * 100:.1f}%, "
            f"Key factors: {factor}"
        )