"""Routing, shared company state and orchestration of agents."""

__all__ = ["orchestrator", "router", "state_manager"]