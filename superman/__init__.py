"""A simulated multi-agent company with prioritised mailboxes and workflow orchestration."""

__version__ = "0.1.0"
__all__ = ["agents", "config", "mailbox", "utils", "workflow"]