import json
import sqlite3
from datetime import timedelta

import pytest

from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.dead_letter import DeadLetterQueue, DLQConfig
from superman.mailbox.message import new_message


@pytest.fixture
def dlq(tmp_path):
    queue = DeadLetterQueue(DLQConfig(db_path=str(tmp_path / "dlq.db")))
    yield queue
    queue.close()


def _msg(sender=AgentRole.CTO, receiver=AgentRole.CEO):
    return new_message(sender, receiver, MessageType.ALERT, {"severity": "high"}).with_priority(
        Priority.HIGH
    )


def test_default_config_values():
    config = DLQConfig()
    assert config.db_path == "./data/dlq.db"
    assert config.max_age == timedelta(days=30)
    assert config.alert_threshold == 100
    assert config.notify_buffer == 1000


def test_add_and_read_pending(dlq):
    msg = _msg()
    dlq.add(msg, 3, "boom", "trace")
    pending = dlq.pending()
    assert len(pending) == 1
    entry = pending[0]
    assert entry.message_id == msg.message_id
    assert entry.sender == AgentRole.CTO
    assert entry.receiver == AgentRole.CEO
    assert entry.retry_count == 3
    assert entry.reason == "boom"
    assert entry.stack_trace == "trace"
    assert entry.status == "pending"


def test_content_round_trips_message(dlq):
    msg = _msg()
    dlq.add(msg, 0, "fail", "")
    document = json.loads(dlq.pending()[0].content)
    assert document["message_id"] == msg.message_id
    assert document["sender"] == "cto"
    assert document["priority"] == int(Priority.HIGH)
    assert document["message_type"] == int(MessageType.ALERT)
    assert document["content"] == {"severity": "high"}


def test_add_same_message_updates_row(dlq):
    msg = _msg()
    first = dlq.add(msg, 1, "first", "")
    second = dlq.add(msg, 2, "second", "")
    assert dlq.total_count() == 1
    assert first.id == second.id
    entry = dlq.pending()[0]
    assert entry.retry_count == 2
    assert entry.reason == "second"


def test_status_changes_and_stats(dlq):
    retried, archived, waiting = _msg(), _msg(), _msg()
    for msg in (retried, archived, waiting):
        dlq.add(msg, 0, "x", "")
    dlq.mark_retried(retried.message_id)
    dlq.mark_archived(archived.message_id)
    assert dlq.stats() == {"pending": 1, "retried": 1, "archived": 1}
    assert [m.message_id for m in dlq.pending()] == [waiting.message_id]


def test_by_receiver_filters(dlq):
    to_ceo = _msg(receiver=AgentRole.CEO)
    to_cfo = _msg(receiver=AgentRole.CFO)
    dlq.add(to_ceo, 0, "x", "")
    dlq.add(to_cfo, 0, "x", "")
    found = dlq.by_receiver(AgentRole.CFO)
    assert [m.message_id for m in found] == [to_cfo.message_id]


def test_limit_applies(dlq):
    for _ in range(4):
        dlq.add(_msg(), 0, "x", "")
    assert len(dlq.pending(2)) == 2
    assert len(dlq.pending(0)) == 4


def test_delete(dlq):
    msg = _msg()
    dlq.add(msg, 0, "x", "")
    dlq.delete(msg.message_id)
    assert dlq.total_count() == 0
    assert dlq.pending() == []


def test_notifications_receive_added_messages(dlq):
    msg = _msg()
    dlq.add(msg, 2, "why", "")
    note = dlq.notifications().get_nowait()
    assert note.message_id == msg.message_id
    assert note.retry_count == 2
    assert note.reason == "why"


def test_full_notify_buffer_still_stores(tmp_path, capsys):
    config = DLQConfig(db_path=str(tmp_path / "dlq.db"), notify_buffer=1)
    with DeadLetterQueue(config) as dlq:
        dlq.add(_msg(), 0, "a", "")
        dlq.add(_msg(), 0, "b", "")
        assert dlq.notifications().qsize() == 1
        assert dlq.total_count() == 2
    assert "notify channel is full" in capsys.readouterr().out


def test_should_alert_at_threshold(tmp_path):
    config = DLQConfig(db_path=str(tmp_path / "dlq.db"), alert_threshold=2)
    with DeadLetterQueue(config) as dlq:
        dlq.add(_msg(), 0, "x", "")
        assert dlq.should_alert() is False
        dlq.add(_msg(), 0, "x", "")
        assert dlq.should_alert() is True


def test_remove_expired(tmp_path):
    config = DLQConfig(db_path=str(tmp_path / "dlq.db"), max_age=timedelta(seconds=-1))
    with DeadLetterQueue(config) as dlq:
        dlq.add(_msg(), 0, "x", "")
        dlq.add(_msg(), 0, "x", "")
        assert dlq.remove_expired() == 2
        assert dlq.total_count() == 0


def test_recent_messages_are_not_expired(dlq):
    dlq.add(_msg(), 0, "x", "")
    assert dlq.remove_expired() == 0
    assert dlq.total_count() == 1


def test_data_persists_across_instances(tmp_path):
    path = str(tmp_path / "dlq.db")
    msg = _msg()
    with DeadLetterQueue(DLQConfig(db_path=path)) as dlq:
        dlq.add(msg, 1, "x", "")
    with DeadLetterQueue(DLQConfig(db_path=path)) as dlq:
        assert [m.message_id for m in dlq.pending()] == [msg.message_id]


def test_closed_queue_rejects_queries(tmp_path):
    dlq = DeadLetterQueue(DLQConfig(db_path=str(tmp_path / "dlq.db")))
    dlq.close()
    with pytest.raises(sqlite3.ProgrammingError):
        dlq.total_count()
    assert dlq.should_alert() is False