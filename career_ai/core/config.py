"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "career_user"
    postgres_password: str = "password"
    postgres_db: str = "career_db"
    # Full URL override (used by tests and hosted databases)
    database_url: Optional[str] = None

    # LLM (OpenAI-compatible, Groq by default)
    llm_api_key: str = ""
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.3-70b-versatile"
    llm_provider: str = "Groq"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4000
    llm_timeout_seconds: float = 60.0

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Daily query quota
    plan_limit_free: int = 5
    plan_limit_premium: int = 50
    plan_limit_pro: int = 999999
    quota_max_attempts: int = 3
    refund_on_gateway_failure: bool = False

    # History
    history_summary_chars: int = 200

    # App
    debug: bool = False
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
