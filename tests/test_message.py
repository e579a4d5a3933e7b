from datetime import datetime

from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.message import MessageContext, new_message


def test_new_message_fields():
    before = datetime.now()
    msg = new_message(
        AgentRole.CTO,
        AgentRole.CEO,
        MessageType.TASK_ASSIGNMENT,
        {"task": "Review Q4 report"},
    )
    assert msg.sender == AgentRole.CTO
    assert msg.receiver == AgentRole.CEO
    assert msg.message_type == MessageType.TASK_ASSIGNMENT
    assert msg.content == {"task": "Review Q4 report"}
    assert msg.priority == Priority.MEDIUM
    assert msg.timestamp >= before
    assert msg.context is None
    assert msg.idempotency_key == ""


def test_new_message_without_content():
    msg = new_message(AgentRole.CTO, AgentRole.CEO, MessageType.TASK_ASSIGNMENT, None)
    assert msg.content is None


def test_message_id_format():
    msg = new_message(AgentRole.CTO, AgentRole.CEO, MessageType.ALERT, None)
    message_id = msg.message_id
    assert len(message_id) == 32
    assert message_id[14] == "."
    assert message_id[:14].isdigit() is True
    assert message_id[15:24].isdigit() is True
    suffix = message_id[24:]
    assert len(suffix) == 8
    assert set(suffix) <= set("abcdefghijklmnopqrstuvwxyz0123456789")


def test_message_ids_are_unique():
    ids = {
        new_message(AgentRole.CTO, AgentRole.CEO, MessageType.ALERT, None).message_id
        for _ in range(200)
    }
    assert len(ids) == 200


def test_with_priority_chains():
    msg = new_message(AgentRole.CTO, AgentRole.CEO, MessageType.TASK_ASSIGNMENT, None)
    assert msg.with_priority(Priority.HIGH) is msg
    assert msg.priority == Priority.HIGH


def test_with_context_and_key():
    msg = new_message(AgentRole.CFO, AgentRole.CEO, MessageType.STATUS_REPORT, {})
    ctx = MessageContext(trace_id="trace-1", span_id="span-1")
    assert msg.with_context(ctx).with_idempotency_key("key-1") is msg
    assert msg.context is ctx
    assert msg.context.parent_id == ""
    assert msg.idempotency_key == "key-1"