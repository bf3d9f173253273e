"""
Application settings

Read from environment variables (case-insensitive) and an optional ``.env``
file. ``get_settings()`` is memoised; ``settings`` is the process-wide instance.
"""
import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TEST_DATABASE_URL = "sqlite:///./test.db"


class Settings(BaseSettings):
    """Settings for the scoring engine, its stores and its caches"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "staging", "production"] = "development"
    testing: bool = False

    app_name: str = "ReadinessScore"
    app_version: str = "0.1.0"

    # Persistence
    database_url: str = "sqlite:///./readiness.db"
    database_pool_size: int = Field(default=10, ge=1)
    database_echo: bool = False

    # Response cache
    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = Field(default=3600, ge=1, description="Seconds a cached score lives in Redis")
    cache_key_prefix: str = "readiness_score"

    # Scoring configuration
    config_cache_ttl_seconds: float = Field(default=300.0, ge=0)
    scoring_weights_path: Optional[str] = Field(
        default=None, description="Override for the packaged default weights YAML document"
    )

    # Rescoring
    rescore_max_concurrency: int = Field(default=1, ge=1, le=32)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    prometheus_enabled: bool = True

    @field_validator("database_url")
    @classmethod
    def use_sqlite_when_testing(cls, v, info):
        if info.data.get("testing") and not v.startswith("sqlite"):
            return TEST_DATABASE_URL
        return v

    @model_validator(mode="after")
    def require_postgres_in_production(self):
        # CI smoke runs of the production profile use SQLite
        if self.is_production and self.database_url.startswith("sqlite") and os.getenv("CI") != "true":
            raise ValueError("Production environment requires a PostgreSQL database_url")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
