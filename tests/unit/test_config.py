"""Tests for Settings defaults, derived properties and production safety."""

import pytest

from listsmith.config import AppEnv, Settings

VALID_KEY = "sk-test-key"
VALID_CORS = "https://listsmith.example.com"


def _settings(**overrides) -> Settings:
    """Create Settings isolated from .env file."""
    return Settings(_env_file=None, **overrides)


class TestProductionSafetyValidator:
    """Verify Settings blocks boot when production invariants are violated."""

    def test_development_allows_missing_key(self):
        s = _settings(app_env=AppEnv.DEVELOPMENT, openai_api_key="")
        assert s.text_generation_configured is False

    def test_production_rejects_missing_openai_key(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            _settings(
                app_env=AppEnv.PRODUCTION,
                openai_api_key="   ",
                cors_allowed_origins=VALID_CORS,
            )

    def test_production_rejects_empty_cors(self):
        with pytest.raises(ValueError, match="CORS_ALLOWED_ORIGINS"):
            _settings(
                app_env=AppEnv.PRODUCTION,
                openai_api_key=VALID_KEY,
                cors_allowed_origins="",
            )

    def test_production_rejects_debug_true(self):
        with pytest.raises(ValueError, match="APP_DEBUG"):
            _settings(
                app_env=AppEnv.PRODUCTION,
                app_debug=True,
                openai_api_key=VALID_KEY,
                cors_allowed_origins=VALID_CORS,
            )

    def test_production_reports_every_violation(self):
        with pytest.raises(ValueError) as exc_info:
            _settings(
                app_env=AppEnv.PRODUCTION,
                app_debug=True,
                openai_api_key="",
                cors_allowed_origins="",
            )

        message = str(exc_info.value)
        assert "APP_DEBUG" in message
        assert "OPENAI_API_KEY" in message
        assert "CORS_ALLOWED_ORIGINS" in message

    def test_production_valid_config_passes(self):
        s = _settings(
            app_env=AppEnv.PRODUCTION,
            app_debug=False,
            openai_api_key=VALID_KEY,
            cors_allowed_origins=VALID_CORS,
        )
        assert s.is_production
        assert s.text_generation_configured

    def test_staging_not_enforced(self):
        s = _settings(app_env=AppEnv.STAGING, app_debug=True)
        assert s.app_env == AppEnv.STAGING


class TestDerivedSettings:
    """Verify computed properties and normalization."""

    def test_defaults(self):
        s = _settings()
        assert s.openai_model == "gpt-4o-mini"
        assert s.openai_max_retries == 2
        assert s.circuit_breaker_failure_threshold == 5

    def test_base_url_trailing_slash_removed(self):
        s = _settings(openai_base_url="https://llm.example.com/v1/")
        assert s.openai_base_url == "https://llm.example.com/v1"

    def test_development_cors_origins(self):
        assert _settings(app_env=AppEnv.DEVELOPMENT).cors_origins == ["http://localhost:3000"]

    def test_cors_origins_parsed(self):
        s = _settings(
            app_env=AppEnv.STAGING,
            cors_allowed_origins=" https://a.example.com, ,https://b.example.com ",
        )
        assert s.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_env_vars_read(self, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = _settings()
        assert s.openai_model == "gpt-4o"
        assert s.log_level == "DEBUG"
