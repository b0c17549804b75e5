import pytest

from todo_service.settings import get_settings

ENV_VARS = [
    "MONGO_URI",
    "MONGO_DB_NAME",
    "PORT",
    "HOST",
    "PERSISTENCE_BACKEND",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.mongo_uri == "mongodb://localhost:27017/todos"
        assert s.mongo_db_name == "todos"
        assert s.port == 5000
        assert s.host == "0.0.0.0"
        assert s.persistence_backend == "mongo"
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"

    def test_database_name_from_uri(self, clean_env):
        clean_env.setenv("MONGO_URI", "mongodb://db.internal:27017/planner?authSource=admin")
        assert get_settings().mongo_db_name == "planner"

    def test_explicit_database_name_wins(self, clean_env):
        clean_env.setenv("MONGO_URI", "mongodb://db.internal:27017/planner")
        clean_env.setenv("MONGO_DB_NAME", "other")
        assert get_settings().mongo_db_name == "other"

    def test_uri_without_database(self, clean_env):
        clean_env.setenv("MONGO_URI", "mongodb://db.internal:27017")
        assert get_settings().mongo_db_name == "todos"

    @pytest.mark.parametrize("raw,expected", [("8080", 8080), ("abc", 5000), ("70000", 5000), ("", 5000)])
    def test_port(self, clean_env, raw, expected):
        clean_env.setenv("PORT", raw)
        assert get_settings().port == expected

    def test_backend_fallback(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "sqlite")
        assert get_settings().persistence_backend == "mongo"
        clean_env.setenv("PERSISTENCE_BACKEND", " Memory ")
        assert get_settings().persistence_backend == "memory"

    def test_cors_origins(self, clean_env):
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_log_level(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "debug")
        assert get_settings().log_level == "DEBUG"
        clean_env.setenv("LOG_LEVEL", "chatty")
        assert get_settings().log_level == "INFO"
