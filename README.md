# superman

A small framework for simulating a company run by role-based agents.
Agents (CEO, CTO, CPO, CMO, CFO) react to status reports, task assignments,
data requests, approval requests and alerts. Messages travel through
per-role mailboxes in priority order; already-processed messages are
skipped by an idempotency checker; failing messages are retried with
exponential back-off and can end up in a SQLite-backed dead letter queue;
a workflow layer ties agents, company state and messaging together.

The package uses only the Python standard library and supports Python 3.10
and later.

## Layout

- `superman.agents.models` – `AgentRole`, `Priority`, `MessageType`,
  `Message`, `Task`, `AgentState`, `CompanyState`, `priority_name`,
  `message_type_name` and `create_empty_state`.
- `superman.agents.base` – `BaseAgent` (message log, tasks, `snapshot`,
  `update_state`, `complete_task`) and `get_agent_name`.
- `superman.agents.ceo`, `.cto`, `.cpo`, `.cmo`, `.cfo` – `CEOAgent`,
  `CTOAgent`, `CPOAgent`, `CMOAgent`, `CFOAgent`.
- `superman.mailbox.message` – the mailbox `Message`, `MessageContext` and
  `new_message`.
- `superman.mailbox.priority_queue` – `PriorityQueue`.
- `superman.mailbox.idempotency` – `IdempotencyChecker`.
- `superman.mailbox.metrics` – `Metrics` and `format_key`.
- `superman.mailbox.dead_letter` – `DeadLetterQueue`, `DLQConfig`,
  `DeadLetterMessage`.
- `superman.mailbox.mailbox` – `Mailbox`, `MailboxConfig`,
  `default_mailbox_config`, `MailboxError`.
- `superman.mailbox.manager` – `MailboxManager`, `MailboxManagerConfig`,
  `default_mailbox_manager_config`.
- `superman.workflow.router` – `MessageRouter`.
- `superman.workflow.state_manager` – `StateManager`, `AgentStatus`.
- `superman.workflow.orchestrator` – `Orchestrator`, `OrchestratorError`.
- `superman.utils` – `format_timestamp`, `parse_timestamp`, `now`.
- `superman.config` – `Config`, `LLMConfig`, `DatabaseConfig`,
  `AgentConfig`, `init_config`.

## Priority ordering

Messages leave a `PriorityQueue` highest priority first; messages of equal
priority leave in the order they arrived.

```python
from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.message import new_message
from superman.mailbox.priority_queue import PriorityQueue

queue = PriorityQueue()
low = new_message(AgentRole.CTO, AgentRole.CEO, MessageType.TASK_ASSIGNMENT, {})
urgent = new_message(AgentRole.CFO, AgentRole.CEO, MessageType.ALERT, {})
queue.enqueue(low.with_priority(Priority.LOW))
queue.enqueue(urgent.with_priority(Priority.CRITICAL))

assert queue.dequeue() is urgent
assert len(queue) == 1
```

`peek`, `remove_by_message_id`, `count_by_priority`, `all_messages` and
`clear` are also available.

## Mailboxes

A `MailboxManager` creates one `Mailbox` per role. Register a handler for
each role, start the manager and send messages; each mailbox works through
its queue on background threads and records what it did in `Metrics`.

```python
from superman.agents.models import AgentRole, MessageType, Priority
from superman.mailbox.manager import MailboxManager, default_mailbox_manager_config

config = default_mailbox_manager_config()
config.enable_dlq = False  # or point config.dlq_config.db_path at a writable file
manager = MailboxManager(config)

def handle(msg):
    print("received", msg.message_id, "from", msg.sender)

manager.register_mailbox(AgentRole.CEO, handle)
manager.start()
manager.send_to(
    AgentRole.CTO,
    AgentRole.CEO,
    MessageType.STATUS_REPORT,
    {"report_type": "financial", "revenue": 2_500_000.0},
    Priority.HIGH,
)
print(manager.all_stats())
manager.stop()
```

By default the dead letter queue is enabled and stored at `./data/dlq.db`;
the directory must exist, otherwise creating the manager raises
`MailboxError`.

A handler signals failure by raising. A handler that raises, or runs past
the timeout for the message's priority (5 s critical, 10 s high, 30 s
medium, 60 s low by default), is retried up to `max_retries` times with a
delay from `Mailbox.calculate_backoff` (base delay doubled per retry,
capped at `max_delay`). After that the message is stored in the dead letter
queue when one is attached and `enable_dlq` is set. Messages that were
processed successfully within the idempotency window are skipped if they
arrive again. `Mailbox.send` raises `MailboxError` for `None`, a full
queue or a full inbox.

## Dead letter queue

```python
from superman.agents.models import AgentRole, MessageType
from superman.mailbox.dead_letter import DeadLetterQueue, DLQConfig
from superman.mailbox.message import new_message

msg = new_message(AgentRole.CTO, AgentRole.CEO, MessageType.ALERT, {"severity": "high"})
with DeadLetterQueue(DLQConfig(db_path=":memory:")) as dlq:
    dlq.add(msg, 3, "handler failed")
    for entry in dlq.pending():
        print(entry.message_id, entry.reason)
    dlq.mark_archived(msg.message_id)
    print(dlq.stats())  # {'archived': 1}
```

New entries are also announced on the queue returned by `notifications()`;
`should_alert()` reports whether the stored count has reached
`alert_threshold`, and a background thread removes entries older than
`max_age`.

## Agents

```python
from superman.agents.ceo import CEOAgent
from superman.agents.models import AgentRole, Message, MessageType, Task

ceo = CEOAgent()
ceo.process_message(Message(
    sender=AgentRole.CFO,
    receiver=AgentRole.CEO,
    message_type=MessageType.STATUS_REPORT,
    content={"report_type": "financial", "revenue": 2_500_000.0},
))
# prints: [CEO] Received financial status report from cfo ...

reply = ceo.generate_response(Task(task_id="t-1", title="Plan Q3", assigned_by=AgentRole.CTO))
print(reply.content["status"])  # completed
```

Each agent prints its analysis of the message it receives; some of them
draw random figures (budgets, team sizes, sample sizes) for their output.

## Company state and orchestration

`StateManager` keeps the shared `CompanyState`, with an `AgentState` for
every role, and reports on it:

```python
from superman.agents.models import create_empty_state
from superman.workflow.state_manager import StateManager

state_manager = StateManager(create_empty_state())
report = state_manager.health_report()
print(report["total_tasks"], report["total_messages"])
```

`Orchestrator` combines a `StateManager`, a `MessageRouter` and a
`MailboxManager`: `run_task` sends a task to its assignee's mailbox and
records it (raising `OrchestratorError` if no agent is registered for the
assignee), and `send_message` / `send_message_to` deliver messages between
roles. `MessageRouter.route_message` returns the message's receiver alone.

## What the package does not do

- There is no command-line program and no web or interactive interface;
  everything is used as a library.
- There is no language-model integration: `LLMConfig` and `AgentConfig`
  only hold settings, and no agent calls a model.
- `AgentRole` lists HR, R&D, data analyst, customer support and operations
  roles, but the package has agent classes only for the CEO, CTO, CPO, CMO
  and CFO.
- The only storage is the SQLite dead letter queue; company state lives in
  memory.