import uuid

from superman.agents.base import get_agent_name
from superman.agents.ceo import CEOAgent
from superman.agents.models import AgentRole, Message, MessageType, Priority, Task


def _msg(kind, content):
    return Message(sender=AgentRole.CFO, receiver=AgentRole.CEO, message_type=kind, content=content)


def test_identity():
    agent = CEOAgent()
    assert agent.role == AgentRole.CEO
    assert agent.role_hierarchy == 1
    assert get_agent_name(agent) == "ceo"
    assert "战略规划" in agent.capabilities


def test_process_message_records_message():
    agent = CEOAgent()
    msg = _msg(MessageType.COLLABORATION, {})
    agent.process_message(msg)
    assert agent.snapshot().messages == [msg]


def test_financial_report_strong(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.STATUS_REPORT, {"report_type": "financial", "revenue": 2000000.0})
    )
    out = capsys.readouterr().out
    assert "[CEO] Received financial status report from cfo" in out
    assert "Consider expansion" in out


def test_financial_report_weak(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.STATUS_REPORT, {"report_type": "financial", "revenue": 10.0})
    )
    assert "Focus on growth strategies" in capsys.readouterr().out


def test_non_float_value_is_ignored(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.STATUS_REPORT, {"report_type": "financial", "revenue": 5})
    )
    out = capsys.readouterr().out
    assert "revenue" not in out.lower().replace("received financial", "")
    assert "Consider expansion" not in out


def test_market_report(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.STATUS_REPORT, {"report_type": "market", "market_share": 0.5})
    )
    assert "Maintain competitive advantage" in capsys.readouterr().out


def test_task_assignment_prints_strategy(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.TASK_ASSIGNMENT, {"task": {"title": "Expand", "priority": "critical"}})
    )
    out = capsys.readouterr().out
    assert "[CEO] Assigning strategic task: Expand" in out
    assert "Strategy: immediate_execution" in out


def test_alert_triggers_crisis_management(capsys):
    agent = CEOAgent()
    agent.process_message(
        _msg(MessageType.ALERT, {"severity": "critical", "description": "outage"})
    )
    out = capsys.readouterr().out
    assert "Critical alert (severity: critical): outage" in out
    assert "Crisis management (high_risk)" in out
    assert "Emergency board meeting" in out


def test_evaluate_strategic_importance():
    agent = CEOAgent()
    assert agent.evaluate_strategic_importance({"priority": "critical"}) == "immediate_execution"
    assert agent.evaluate_strategic_importance({"priority": "high"}) == "priority_allocation"
    assert agent.evaluate_strategic_importance({"priority": "medium"}) == "balanced_approach"
    assert agent.evaluate_strategic_importance({"priority": "low"}) == "standard_processing"
    assert agent.evaluate_strategic_importance({}) == "standard_processing"


def test_assess_risk():
    agent = CEOAgent()
    assert agent.assess_risk({"severity": "critical"}) == "high_risk"
    assert agent.assess_risk({"severity": "high"}) == "medium_risk"
    assert agent.assess_risk({"severity": "low"}) == "low_risk"
    assert agent.assess_risk({}) == "low_risk"


def test_generate_response():
    agent = CEOAgent()
    task = Task(
        task_id="task-1", title="Plan", assigned_by=AgentRole.CTO, priority=Priority.HIGH
    )
    response = agent.generate_response(task)
    assert response.sender == AgentRole.CEO
    assert response.receiver == AgentRole.CTO
    assert response.message_type == MessageType.STATUS_REPORT
    assert response.priority == Priority.HIGH
    assert response.content["status"] == "completed"
    assert response.content["task_id"] == "task-1"
    assert response.content["executive_summary"] == "Task 'Plan' completed by CEO"
    assert response.content["results"] == "Strategic execution complete"
    assert str(uuid.UUID(response.message_id)) == response.message_id
    assert agent.snapshot().messages[-1] is response