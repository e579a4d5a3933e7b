import superman.config as config_module
from superman.config import AgentConfig, Config, DatabaseConfig, LLMConfig, init_config


def test_init_config_is_empty():
    cfg = init_config()
    assert cfg.llm == []
    assert cfg.database is None
    assert cfg.agents == {}


def test_init_config_sets_app_config():
    cfg = init_config()
    assert config_module.app_config is cfg


def test_init_config_resets():
    cfg = init_config()
    cfg.agents["ceo"] = AgentConfig(model="m", temperature=0.5)
    fresh = init_config()
    assert fresh.agents == {}
    assert fresh is not cfg
    assert cfg.agents["ceo"].temperature == 0.5


def test_config_holds_sections():
    llm = LLMConfig(model="m", base_url="http://localhost", api_key="placeholder")
    database = DatabaseConfig(db_name="company")
    cfg = Config(llm=[llm], database=database)
    assert cfg.llm[0].api_key == "placeholder"
    assert cfg.llm[0].base_url == "http://localhost"
    assert cfg.database.db_name == "company"
    assert cfg.agents == {}