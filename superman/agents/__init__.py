"""Agent data model, the base agent and the CEO, CTO, CPO, CMO and CFO agents."""

__all__ = ["base", "ceo", "cfo", "cmo", "cpo", "cto", "models"]