from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from insights_service.domain.pipeline.constants import (
    DEFAULT_BUCKET,
    DEFAULT_INSIGHTS_TABLE,
    DEFAULT_TEMPERATURE,
    DEFAULT_WINDOW_HEAD_CHARS,
    DEFAULT_WINDOW_TAIL_CHARS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INSIGHTS_", env_file=".env", extra="ignore")

    APP_NAME: str = Field(default="legal-insights-service")
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Object storage (S3-compatible)
    S3_ENDPOINT: str | None = Field(default=None)
    S3_ACCESS_KEY: str = Field(default="")
    S3_SECRET_KEY: SecretStr = Field(default=SecretStr(""))
    S3_BUCKET: str = Field(default=DEFAULT_BUCKET)
    S3_SECURE: bool = Field(default=True)
    S3_REGION: str | None = Field(default=None)
    FETCH_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Completion service (OpenAI-compatible chat completions)
    LLM_BASE_URL: str | None = Field(default="https://api.groq.com/openai/v1")
    LLM_API_KEY: SecretStr = Field(default=SecretStr(""))
    LLM_MODEL: str = Field(default="llama3-70b-8192")
    LLM_TEMPERATURE: float = Field(default=DEFAULT_TEMPERATURE)
    LLM_MAX_TOKENS: int = Field(default=1500)
    LLM_TIMEOUT_SECONDS: float = Field(default=60.0)
    LLM_VERIFY_SSL: bool = Field(default=True)

    # Prompt window
    WINDOW_HEAD_CHARS: int = Field(default=DEFAULT_WINDOW_HEAD_CHARS, ge=0)
    WINDOW_TAIL_CHARS: int = Field(default=DEFAULT_WINDOW_TAIL_CHARS, ge=0)

    # Database
    DB_DSN: str | None = Field(default=None)
    DB_POOL_MIN_SIZE: int = Field(default=1)
    DB_POOL_MAX_SIZE: int = Field(default=10)
    DB_COMMAND_TIMEOUT: float = Field(default=10.0)
    INSIGHTS_TABLE: str = Field(default=DEFAULT_INSIGHTS_TABLE)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
