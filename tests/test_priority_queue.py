from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.message import new_message
from superman.mailbox.priority_queue import PriorityQueue


def make(priority, sender=AgentRole.CTO):
    return new_message(sender, AgentRole.CEO, MessageType.TASK_ASSIGNMENT, None).with_priority(
        priority
    )


def test_priority_order():
    pq = PriorityQueue()
    pq.enqueue(make(Priority.LOW))
    pq.enqueue(make(Priority.HIGH, AgentRole.CFO))
    pq.enqueue(make(Priority.CRITICAL))
    pq.enqueue(make(Priority.MEDIUM, AgentRole.CPO))

    order = [pq.dequeue().priority for _ in range(4)]
    assert order == [Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW]
    assert pq.dequeue() is None


def test_equal_priority_is_fifo():
    pq = PriorityQueue()
    messages = [make(Priority.MEDIUM) for _ in range(5)]
    for msg in messages:
        pq.enqueue(msg)
    assert [pq.dequeue() for _ in range(5)] == messages


def test_peek():
    pq = PriorityQueue()
    assert pq.peek() is None
    msg = make(Priority.MEDIUM)
    pq.enqueue(msg)
    assert pq.peek() is msg
    assert len(pq) == 1


def test_remove_by_message_id():
    pq = PriorityQueue()
    msg1 = make(Priority.MEDIUM)
    msg2 = make(Priority.HIGH, AgentRole.CFO)
    pq.enqueue(msg1)
    pq.enqueue(msg2)

    assert pq.remove_by_message_id("non-existent") is False
    assert pq.remove_by_message_id(msg1.message_id) is True
    assert len(pq) == 1
    assert pq.dequeue() is msg2


def test_remove_keeps_heap_order():
    pq = PriorityQueue()
    messages = [make(Priority(i % 4)) for i in range(8)]
    for msg in messages:
        pq.enqueue(msg)
    pq.remove_by_message_id(messages[3].message_id)
    drained = [pq.dequeue().priority for _ in range(7)]
    assert drained == sorted(drained, reverse=True)


def test_clear():
    pq = PriorityQueue()
    for i in range(5):
        pq.enqueue(make(Priority(i % 4)))
    assert len(pq) == 5
    pq.clear()
    assert len(pq) == 0
    assert pq.peek() is None


def test_count_by_priority():
    pq = PriorityQueue()
    for _ in range(3):
        pq.enqueue(make(Priority.HIGH))
    for _ in range(2):
        pq.enqueue(make(Priority.LOW, AgentRole.CFO))
    assert pq.count_by_priority(Priority.HIGH) == 3
    assert pq.count_by_priority(Priority.LOW) == 2
    assert pq.count_by_priority(Priority.CRITICAL) == 0


def test_all_messages_is_a_copy():
    pq = PriorityQueue()
    messages = [make(Priority(i % 4)) for i in range(5)]
    for msg in messages:
        pq.enqueue(msg)

    everything = pq.all_messages()
    assert len(everything) == 5
    assert set(m.message_id for m in everything) == set(m.message_id for m in messages)

    everything[0] = None
    assert len(pq) == 5
    assert None not in pq.all_messages()