import threading
from datetime import datetime

from superman.agents.models import (
    AgentRole,
    Message,
    MessageType,
    Priority,
    Task,
    create_empty_state,
)
from superman.workflow.state_manager import AgentStatus, StateManager


def _manager():
    return StateManager(create_empty_state())


def test_new_state_manager_creates_all_agents():
    state = _manager().state()
    assert len(state.agents) == 10
    for role in AgentRole:
        assert role in state.agents


def test_concurrent_add_message():
    sm = _manager()

    def worker(idx):
        sm.add_message(
            Message(
                message_id="msg-concurrent-test",
                sender=AgentRole.CTO,
                receiver=AgentRole.CEO,
                message_type=MessageType.TASK_ASSIGNMENT,
                content={"index": idx},
                priority=Priority.MEDIUM,
            )
        )

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(sm.state().messages) == 10


def test_add_task():
    sm = _manager()
    task = Task(
        task_id="task-001",
        title="Test Task",
        description="Description",
        assigned_to=AgentRole.RD,
        assigned_by=AgentRole.CTO,
        priority=Priority.HIGH,
        status="pending",
        deliverables=["deliverable1"],
    )
    sm.add_task(task)
    assert sm.state().tasks["task-001"].title == "Test Task"


def test_timestamp_is_state_clock():
    initial = create_empty_state()
    sm = StateManager(initial)
    ts = sm.timestamp()
    assert isinstance(ts, datetime)
    assert ts == initial.current_time


def test_create_agent_state_for_new_role_and_repeat():
    sm = _manager()
    sm.create_agent_state("dummy")
    state = sm.state()
    assert "dummy" in state.agents
    sm.create_agent_state("dummy")
    assert len(state.agents) == 11


def test_create_agent_state_does_not_replace_existing():
    sm = _manager()
    before = sm.state().agents[AgentRole.CEO]
    sm.create_agent_state(AgentRole.CEO)
    assert sm.state().agents[AgentRole.CEO] is before


def test_health_report():
    sm = _manager()
    for i in range(3):
        sm.add_task(Task(task_id=f"task-health-{i}", title=f"Task {i}", status="in_progress"))
    for i in range(5):
        sm.add_message(
            Message(
                message_id=f"msg-health-{i}",
                sender=AgentRole.CTO,
                receiver=AgentRole.CEO,
                message_type=MessageType.TASK_ASSIGNMENT,
            )
        )
    report = sm.health_report()
    assert {"agents", "total_tasks", "total_messages", "current_time"} <= set(report)
    assert report["total_tasks"] == 3
    assert report["total_messages"] == 5
    assert report["agents"]["ceo"] == AgentStatus(role="ceo")
    assert len(report["agents"]) == 10


def test_state_is_shared():
    sm = _manager()
    state1 = sm.state()
    state2 = sm.state()
    state2.tasks["test-task"] = Task(task_id="test-task")
    assert "test-task" in state1.tasks


def test_empty_operations():
    state = _manager().state()
    assert len(state.tasks) == 0
    assert len(state.messages) == 0
    assert len(state.agents) == 10


def test_agent_state_initial_values():
    ceo = _manager().state().agents[AgentRole.CEO]
    assert ceo.role == AgentRole.CEO
    assert ceo.workload == 0
    assert ceo.current_tasks == []
    assert ceo.completed_tasks == []
    assert isinstance(ceo.last_active, datetime)