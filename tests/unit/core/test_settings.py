"""
Test application settings
"""
import pytest
from pydantic import ValidationError

from core.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("ENVIRONMENT", "TESTING", "LOG_FORMAT", "CACHE_BACKEND"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.database_url == "sqlite:///./readiness.db"
        assert settings.cache_backend == "memory"
        assert settings.config_cache_ttl_seconds == 300.0
        assert settings.rescore_max_concurrency == 1
        assert settings.is_development

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("CACHE_BACKEND", "redis")
        monkeypatch.setenv("CONFIG_CACHE_TTL_SECONDS", "30")
        monkeypatch.setenv("RESCORE_MAX_CONCURRENCY", "8")

        settings = Settings(_env_file=None)

        assert settings.cache_backend == "redis"
        assert settings.config_cache_ttl_seconds == 30.0
        assert settings.rescore_max_concurrency == 8

    @pytest.mark.parametrize(
        "overrides",
        [
            {"environment": "qa"},
            {"cache_backend": "memcached"},
            {"log_format": "xml"},
            {"rescore_max_concurrency": 0},
            {"config_cache_ttl_seconds": -1},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)

    def test_testing_forces_sqlite(self):
        settings = Settings(_env_file=None, testing=True, database_url="postgresql://localhost/readiness")

        assert settings.database_url == "sqlite:///./test.db"

    def test_production_requires_postgres(self, monkeypatch):
        monkeypatch.delenv("CI", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production", testing=False, database_url="sqlite:///./prod.db")

        settings = Settings(
            _env_file=None, environment="production", testing=False, database_url="postgresql://db/readiness"
        )
        assert settings.is_production
