"""
ListSmith application configuration.

Loads settings from environment variables with validation via Pydantic Settings.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Application ──────────────────────────────────────────
    app_name: str = "ListSmith"
    app_env: AppEnv = AppEnv.DEVELOPMENT
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # ─── OpenAI (text generation) ────────────────────────────
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_seconds: float = 60.0
    openai_max_retries: int = 2

    # ─── Resilience ──────────────────────────────────────────
    circuit_breaker_failure_threshold: int = 5
    circuit_breaker_cooldown_seconds: int = 120

    # ─── Observability ──────────────────────────────────────────
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = 0.1
    sentry_profiles_sample_rate: float = 0.1
    log_level: str = "INFO"
    log_format: str = "auto"

    # ─── HTTP ───────────────────────────────────────────────────
    gzip_minimum_size: int = 500  # Min response bytes for gzip compression
    cors_allowed_origins: str = ""  # Comma-separated origins for production

    @model_validator(mode="after")
    def normalize_openai_base_url(self) -> "Settings":
        """Drop a trailing slash so endpoint paths can be appended verbatim."""
        self.openai_base_url = self.openai_base_url.rstrip("/")
        return self

    @model_validator(mode="after")
    def enforce_production_safety(self) -> "Settings":
        """Block application boot if production safety invariants are violated.

        Only fires when APP_ENV=production. Development and test environments
        boot without an OpenAI key; generation endpoints then answer with a
        configuration error instead.
        """
        if self.app_env != AppEnv.PRODUCTION:
            return self

        violations: list[str] = []

        if self.app_debug:
            violations.append("APP_DEBUG must be False in production")

        if not self.openai_api_key.strip():
            violations.append("OPENAI_API_KEY must be set in production")

        if not self.cors_allowed_origins.strip():
            violations.append("CORS_ALLOWED_ORIGINS must be non-empty in production")

        if violations:
            raise ValueError(
                "Production safety check failed:\n  - " + "\n  - ".join(violations)
            )

        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == AppEnv.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.app_env == AppEnv.PRODUCTION

    @property
    def text_generation_configured(self) -> bool:
        return bool(self.openai_api_key.strip())

    @property
    def cors_origins(self) -> list[str]:
        # Dev uses the Next.js default port; prod reads CORS_ALLOWED_ORIGINS
        if self.is_development:
            return ["http://localhost:3000"]
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
