"""
Unit Tests for settings parsing
"""
from bachub.core.config import Settings, parse_cors_origins


class TestConfig:

    def test_cors_comma_separated(self):
        assert parse_cors_origins("http://a.test, http://b.test,") == ["http://a.test", "http://b.test"]

    def test_cors_json_list(self):
        assert parse_cors_origins('["http://a.test"]') == ["http://a.test"]

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("SESSION_TTL_MINUTES", "30")

        settings = Settings()

        assert settings.STORAGE_BACKEND == "memory"
        assert settings.SESSION_TTL_MINUTES == 30

    def test_api_prefix_default(self):
        assert Settings().API_PREFIX == "/api"
