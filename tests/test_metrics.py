from datetime import timedelta

from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.metrics import Metrics, format_key


def test_format_key_joins_with_underscores():
    assert format_key("ceo", "cto", "alert") == "ceo_cto_alert"
    assert format_key("single") == "single"
    assert format_key() == ""


def test_empty_snapshot_has_zero_timings():
    snap = Metrics().snapshot()
    assert snap["message_latency_p99"] == 0
    assert snap["processing_duration_avg"] == 0
    assert snap["wal_write_latency_p99"] == 0
    assert snap["messages_sent_total"] == {}
    assert snap["uptime_seconds"] >= 0


def test_record_message_sent_counts_per_key():
    metrics = Metrics()
    metrics.record_message_sent(AgentRole.CTO, AgentRole.CEO, MessageType.TASK_ASSIGNMENT)
    metrics.record_message_sent(AgentRole.CTO, AgentRole.CEO, MessageType.TASK_ASSIGNMENT)
    metrics.record_message_sent(AgentRole.CFO, AgentRole.CEO, MessageType.ALERT)
    sent = metrics.snapshot()["messages_sent_total"]
    assert sent[format_key("cto", "ceo", "task_assignment")] == 2
    assert sent[format_key("cfo", "ceo", "alert")] == 1


def test_record_received_and_processed():
    metrics = Metrics()
    metrics.record_message_received(AgentRole.CEO, MessageType.STATUS_REPORT)
    metrics.record_message_processed(AgentRole.CEO, "success")
    metrics.record_message_processed(AgentRole.CEO, "failed")
    metrics.record_message_processed(AgentRole.CEO, "success")
    snap = metrics.snapshot()
    assert snap["messages_received_total"] == {format_key("ceo", "status_report"): 1}
    assert snap["messages_processed_total"][format_key("ceo", "success")] == 2
    assert snap["messages_processed_total"][format_key("ceo", "failed")] == 1


def test_queue_depth_is_a_gauge():
    metrics = Metrics()
    metrics.record_queue_depth(AgentRole.CEO, Priority.HIGH, 7)
    metrics.record_queue_depth(AgentRole.CEO, Priority.HIGH, 3)
    assert metrics.snapshot()["mailbox_queue_depth"] == {format_key("ceo", "high"): 3}


def test_retry_counts_per_receiver():
    metrics = Metrics()
    metrics.record_retry(AgentRole.CMO)
    metrics.record_retry(AgentRole.CMO)
    assert metrics.snapshot()["mailbox_retry_total"] == {"cmo": 2}


def test_single_duration_sets_p99_and_avg():
    metrics = Metrics()
    metrics.record_processing_duration(timedelta(milliseconds=42))
    snap = metrics.snapshot()
    assert snap["processing_duration_p99"] == 42
    assert snap["processing_duration_avg"] == 42


def test_seconds_are_accepted_as_durations():
    metrics = Metrics()
    metrics.record_message_latency(0.25)
    assert metrics.snapshot()["message_latency_avg"] == 250


def test_p99_never_below_average():
    metrics = Metrics()
    for ms in (5, 10, 200, 15, 3):
        metrics.record_message_latency(timedelta(milliseconds=ms))
    snap = metrics.snapshot()
    assert snap["message_latency_p99"] >= snap["message_latency_avg"]
    assert snap["message_latency_p99"] == 200


def test_latency_window_keeps_last_thousand():
    metrics = Metrics()
    metrics.record_message_latency(timedelta(milliseconds=9999))
    for _ in range(1000):
        metrics.record_message_latency(timedelta(milliseconds=1))
    snap = metrics.snapshot()
    assert snap["message_latency_p99"] == 1
    assert snap["message_latency_avg"] == 1


def test_wal_window_keeps_last_hundred():
    metrics = Metrics()
    metrics.record_wal_write_latency(timedelta(milliseconds=500))
    for _ in range(100):
        metrics.record_wal_write_latency(timedelta(milliseconds=2))
    assert metrics.snapshot()["wal_write_latency_p99"] == 2


def test_gauges_and_reset():
    metrics = Metrics()
    metrics.set_wal_size(4096)
    metrics.set_dlq_depth(12)
    metrics.record_retry(AgentRole.HR)
    metrics.record_processing_duration(timedelta(milliseconds=8))
    snap = metrics.snapshot()
    assert snap["wal_size_bytes"] == 4096
    assert snap["dlq_depth_total"] == 12

    metrics.reset()
    snap = metrics.snapshot()
    assert snap["wal_size_bytes"] == 0
    assert snap["dlq_depth_total"] == 0
    assert snap["mailbox_retry_total"] == {}
    assert snap["processing_duration_p99"] == 0


def test_snapshot_is_a_copy():
    metrics = Metrics()
    metrics.record_retry(AgentRole.RD)
    snap = metrics.snapshot()
    snap["mailbox_retry_total"]["rd"] = 100
    assert metrics.snapshot()["mailbox_retry_total"] == {"rd": 1}