"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LLMConfig:
    """Endpoint and credentials for a model provider."""

    model: str = ""
    base_url: str = ""
    api_key: str = ""


@dataclass
class DatabaseConfig:
    """Settings for the local database."""

    db_name: str = ""


@dataclass
class AgentConfig:
    """Per-agent model settings."""

    model: str = ""
    temperature: float = 0.0


@dataclass
class Config:
    """The whole application configuration."""

    llm: list[LLMConfig] = field(default_factory=list)
    database: DatabaseConfig | None = None
    agents: dict[str, AgentConfig] = field(default_factory=dict)


app_config = Config()


def init_config() -> Config:
    """Reset the application configuration to an empty one and return it."""
    global app_config
    app_config = Config(agents={})
    return app_config