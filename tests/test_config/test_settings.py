"""Testes para config.settings (base e email)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from config.settings import (
    DEFAULT_SMTP_PORT,
    DEFAULT_SOCKET_TIMEOUT_MS,
    DEFAULT_SSL_SMTP_PORT,
    BaseSettings,
    EnvironmentDefaults,
    get_base_settings,
    get_environment_defaults,
)
from config.settings.base.core import _load_base_from_env, _parse_environment
from config.settings.email import _load_from_env


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_environment_defaults.cache_clear()
    get_base_settings.cache_clear()
    yield
    get_environment_defaults.cache_clear()
    get_base_settings.cache_clear()


class TestEnvironmentDefaults:
    """Defaults de ambiente do montador."""

    def test_defaults_match_classic_smtp_values(self) -> None:
        defaults = EnvironmentDefaults()
        assert defaults.host == ""
        assert defaults.smtp_port == DEFAULT_SMTP_PORT == 25
        assert defaults.ssl_smtp_port == DEFAULT_SSL_SMTP_PORT == 465
        assert defaults.socket_timeout_ms == DEFAULT_SOCKET_TIMEOUT_MS == 60_000
        assert defaults.socket_connection_timeout_ms == 60_000
        assert defaults.charset is None
        assert defaults.debug is False

    def test_model_is_frozen_and_validates_port(self) -> None:
        defaults = EnvironmentDefaults(host="smtp.example.com")
        with pytest.raises(ValidationError):
            defaults.host = "other"  # type: ignore[misc]
        with pytest.raises(ValidationError):
            EnvironmentDefaults(smtp_port=0)

    def test_validate_settings_reports_missing_host_and_from(self) -> None:
        errors = EnvironmentDefaults().validate_settings()
        assert len(errors) == 2
        assert EnvironmentDefaults(
            host="smtp.example.com",
            from_address="noreply@example.com",
        ).validate_settings() == []

    def test_load_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMAIL_SMTP_HOST", "smtp.example.com")
        monkeypatch.setenv("EMAIL_SMTP_PORT", "587")
        monkeypatch.setenv("EMAIL_FROM_EMAIL", "noreply@example.com")
        monkeypatch.setenv("EMAIL_CHARSET", "  ")
        monkeypatch.setenv("EMAIL_DEBUG", "true")
        monkeypatch.setenv("EMAIL_SOCKET_TIMEOUT_MS", "0")

        defaults = _load_from_env()

        assert defaults.host == "smtp.example.com"
        assert defaults.smtp_port == 587
        assert defaults.from_address == "noreply@example.com"
        assert defaults.charset is None
        assert defaults.debug is True
        assert defaults.socket_timeout_ms == 0

    def test_get_environment_defaults_is_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMAIL_SMTP_HOST", "first.example.com")
        first = get_environment_defaults()
        monkeypatch.setenv("EMAIL_SMTP_HOST", "second.example.com")
        assert get_environment_defaults() is first


class TestBaseSettings:
    """Settings base do serviço."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("STAGE", "staging"), ("qualquer", "development")],
    )
    def test_parse_environment(self, raw: str, expected: str) -> None:
        assert _parse_environment(raw) == expected

    def test_strict_environments(self) -> None:
        assert BaseSettings(environment="staging").is_strict is True
        assert BaseSettings(environment="production").is_production is True
        assert BaseSettings().is_strict is False

    def test_validate_flags_invalid_log_level(self) -> None:
        errors = BaseSettings(log_level="LOUD").validate()
        assert errors == ["LOG_LEVEL inválido: LOUD"]

    def test_load_base_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = _load_base_from_env()
        assert settings.environment == "production"
        assert settings.log_level == "DEBUG"
        assert settings.service_name == "remessa"
