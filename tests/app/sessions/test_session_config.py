"""Testes para SessionConfig e MailSession."""

from __future__ import annotations

import logging

import pytest

from app.sessions import (
    SESSION_ALREADY_INITIALIZED_MSG,
    DefaultAuthenticator,
    MailSession,
    SessionConfig,
)
from app.sessions.models import (
    MAIL_FROM,
    MAIL_HOST,
    MAIL_PORT,
    MAIL_SMTP_AUTH,
    MAIL_SMTP_CONNECTIONTIMEOUT,
    MAIL_SMTP_FROM,
    MAIL_SMTP_PASSWORD,
    MAIL_SMTP_SEND_PARTIAL,
    MAIL_SMTP_SOCKET_FACTORY_PORT,
    MAIL_SMTP_SSL_CHECKSERVERIDENTITY,
    MAIL_SMTP_SSL_ENABLE,
    MAIL_SMTP_STARTTLS_ENABLE,
    MAIL_SMTP_TIMEOUT,
    MAIL_SMTP_USER,
    MAIL_TRANSPORT_PROTOCOL,
)
from config.settings import EnvironmentDefaults
from fsm import SessionConfigState
from utils.errors import MissingHostError, SessionAlreadyInitializedError


class FakeDirectory:
    """Diretório de sessões em memória."""

    def __init__(self, entries: dict[str, dict[str, str]]) -> None:
        self.entries = entries
        self.lookups: list[str] = []

    def lookup(self, name: str) -> dict[str, str]:
        self.lookups.append(name)
        return self.entries[name]


class TestSessionConfigSetters:
    """Setters e leitura antes da sessão existir."""

    def test_initial_values_come_from_defaults(self) -> None:
        config = SessionConfig(
            EnvironmentDefaults(smtp_port=2525, socket_timeout_ms=5_000, debug=True)
        )
        assert config.state is SessionConfigState.CONFIGURABLE
        assert config.smtp_port == 2525
        assert config.ssl_smtp_port == 465
        assert config.socket_timeout_ms == 5_000
        assert config.debug is True
        assert config.session is None

    @pytest.mark.parametrize("port", [0, -1])
    def test_invalid_ports_raise(self, port: int) -> None:
        config = SessionConfig()
        with pytest.raises(ValueError):
            config.set_smtp_port(port)
        with pytest.raises(ValueError):
            config.set_ssl_smtp_port(port)

    def test_bounce_address_is_validated(self) -> None:
        config = SessionConfig()
        config.set_bounce_address("bounce@example.com")
        assert config.bounce_address == "bounce@example.com"

        with pytest.raises(ValueError) as exc_info:
            config.set_bounce_address("sem-arroba")
        assert exc_info.value.__cause__ is not None
        assert config.bounce_address == "bounce@example.com"

        config.set_bounce_address(None)
        assert config.bounce_address is None

    def test_set_authentication_creates_default_authenticator(self) -> None:
        config = SessionConfig()
        config.set_authentication("usuario", "segredo")
        assert isinstance(config.authenticator, DefaultAuthenticator)
        credentials = config.authenticator.get_credentials()
        assert credentials is not None
        assert credentials.username == "usuario"
        assert "segredo" not in repr(credentials)


class TestGetSession:
    """Criação e congelamento da sessão."""

    def test_missing_host_raises(self) -> None:
        with pytest.raises(MissingHostError):
            SessionConfig().get_session()

    def test_host_from_defaults(self) -> None:
        config = SessionConfig(EnvironmentDefaults(host="smtp.example.com"))
        assert config.get_session().host == "smtp.example.com"

    def test_creation_log_carries_lifecycle_summary(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Log de criação traz estado congelado e gatilho."""
        config = SessionConfig(EnvironmentDefaults(host="smtp.example.com"))
        with caplog.at_level(logging.INFO, logger="app.sessions.config"):
            config.get_session()

        record = next(r for r in caplog.records if r.getMessage() == "mail_session_created")
        assert record.fsm["owner_id"] == "session_config"
        assert record.fsm["current_state"] == "FROZEN"
        assert record.fsm["valid_targets"] == []
        (transition,) = record.fsm_history
        assert transition["from_state"] == "CONFIGURABLE"
        assert transition["trigger"] == "get_session"

    def test_plain_session_properties(self) -> None:
        config = SessionConfig()
        config.set_host("smtp.example.com")
        config.set_smtp_port(587)
        config.set_socket_timeout(0)
        config.set_socket_connection_timeout(-5)

        session = config.get_session()

        assert session.port == 587
        assert session.properties[MAIL_TRANSPORT_PROTOCOL] == "smtp"
        assert session.properties[MAIL_HOST] == "smtp.example.com"
        assert session.properties[MAIL_PORT] == "587"
        assert MAIL_SMTP_AUTH not in session.properties
        assert MAIL_SMTP_TIMEOUT not in session.properties
        assert MAIL_SMTP_CONNECTIONTIMEOUT not in session.properties
        assert session.socket_timeout_seconds is None
        assert session.connection_timeout_seconds is None

    def test_ssl_session_uses_ssl_port(self) -> None:
        config = SessionConfig()
        config.set_host("smtp.example.com")
        config.set_ssl_on_connect(True)
        config.set_ssl_smtp_port(4650)
        config.set_ssl_check_server_identity(True)
        config.set_authentication("u", "p")

        session = config.get_session()

        assert session.port == 4650
        assert session.ssl_on_connect is True
        assert session.properties[MAIL_SMTP_SOCKET_FACTORY_PORT] == "4650"
        assert session.properties[MAIL_SMTP_SSL_ENABLE] == "true"
        assert session.properties[MAIL_SMTP_SSL_CHECKSERVERIDENTITY] == "true"
        assert session.properties[MAIL_SMTP_AUTH] == "true"
        assert session.requires_auth is True

    def test_flags_and_bounce_in_properties(self) -> None:
        config = SessionConfig()
        config.set_host("smtp.example.com")
        config.set_start_tls_enabled(True)
        config.set_send_partial(True)
        config.set_bounce_address("bounce@example.com")
        config.set_socket_timeout(1_500)

        session = config.get_session()

        assert session.properties[MAIL_SMTP_STARTTLS_ENABLE] == "true"
        assert session.properties[MAIL_SMTP_SEND_PARTIAL] == "true"
        assert session.properties[MAIL_SMTP_FROM] == "bounce@example.com"
        assert session.properties[MAIL_SMTP_TIMEOUT] == "1500"
        assert session.socket_timeout_seconds == 1.5
        assert session.send_partial is True

    def test_session_is_created_once_and_freezes_config(self) -> None:
        config = SessionConfig()
        config.set_host("smtp.example.com")

        first = config.get_session()

        assert config.get_session() is first
        assert config.is_frozen is True
        with pytest.raises(SessionAlreadyInitializedError, match=SESSION_ALREADY_INITIALIZED_MSG):
            config.set_host("outro.example.com")
        with pytest.raises(SessionAlreadyInitializedError):
            config.set_debug(True)
        assert config.host == "smtp.example.com"

    def test_session_properties_are_read_only(self) -> None:
        config = SessionConfig(EnvironmentDefaults(host="smtp.example.com"))
        session = config.get_session()
        with pytest.raises(TypeError):
            session.properties[MAIL_HOST] = "x"  # type: ignore[index]


class TestExternalSession:
    """Adoção de sessão externa."""

    def test_set_mail_session_attaches_authenticator(self) -> None:
        session = MailSession.from_properties(
            {
                MAIL_HOST: "smtp.example.com",
                MAIL_SMTP_AUTH: "true",
                MAIL_SMTP_USER: "usuario",
                MAIL_SMTP_PASSWORD: "segredo",
            }
        )
        config = SessionConfig()

        config.set_mail_session(session)

        adopted = config.get_session()
        assert adopted.authenticator is not None
        assert adopted.authenticator.get_credentials().username == "usuario"
        assert config.is_frozen is True

    def test_set_mail_session_without_credentials_keeps_handle(self) -> None:
        session = MailSession(host="smtp.example.com", properties={MAIL_SMTP_AUTH: "true"})
        config = SessionConfig()
        config.set_mail_session(session)
        assert config.get_session() is session

    def test_set_mail_session_after_freeze_raises(self) -> None:
        config = SessionConfig(EnvironmentDefaults(host="smtp.example.com"))
        config.get_session()
        with pytest.raises(SessionAlreadyInitializedError):
            config.set_mail_session(MailSession(host="outro.example.com"))

    def test_from_directory(self) -> None:
        directory = FakeDirectory(
            {"mail/Principal": {MAIL_HOST: "smtp.example.com", MAIL_PORT: "2525"}}
        )
        config = SessionConfig()

        config.set_mail_session_from_directory("mail/Principal", directory)

        assert directory.lookups == ["mail/Principal"]
        assert config.get_session().port == 2525

    def test_from_directory_requires_name(self) -> None:
        with pytest.raises(ValueError):
            SessionConfig().set_mail_session_from_directory("", FakeDirectory({}))

    def test_from_directory_without_host_raises(self) -> None:
        directory = FakeDirectory({"vazia": {}})
        config = SessionConfig()
        with pytest.raises(MissingHostError):
            config.set_mail_session_from_directory("vazia", directory)
        assert config.is_frozen is False

    def test_from_directory_after_freeze_skips_lookup(self) -> None:
        """Sessão já criada: erro antes de consultar o diretório."""
        directory = FakeDirectory({"mail/Principal": {MAIL_HOST: "outro.example.com"}})
        config = SessionConfig(EnvironmentDefaults(host="smtp.example.com"))
        config.get_session()

        with pytest.raises(SessionAlreadyInitializedError):
            config.set_mail_session_from_directory("mail/Principal", directory)

        assert directory.lookups == []
        assert config.get_session().host == "smtp.example.com"


class TestDefaultFrom:
    """Resolução do remetente padrão."""

    def test_prefers_session_properties(self) -> None:
        config = SessionConfig(EnvironmentDefaults(from_address="env@example.com"))
        config.set_mail_session(
            MailSession(host="smtp.example.com", properties={MAIL_FROM: "sessao@example.com"})
        )
        assert config.default_from() == "sessao@example.com"

    def test_falls_back_to_bounce_then_environment(self) -> None:
        config = SessionConfig(EnvironmentDefaults(from_address="env@example.com"))
        assert config.default_from() == "env@example.com"
        config.set_bounce_address("bounce@example.com")
        assert config.default_from() == "bounce@example.com"

    def test_none_when_nothing_configured(self) -> None:
        assert SessionConfig().default_from() is None


class TestMailSession:
    """Validação do handle de sessão."""

    def test_requires_host(self) -> None:
        with pytest.raises(MissingHostError):
            MailSession(host="")

    def test_rejects_invalid_port(self) -> None:
        with pytest.raises(ValueError):
            MailSession(host="smtp.example.com", port=0)

    def test_from_properties_parses_flags(self) -> None:
        session = MailSession.from_properties(
            {
                MAIL_HOST: "smtp.example.com",
                MAIL_PORT: "465",
                MAIL_SMTP_SSL_ENABLE: "TRUE",
                MAIL_SMTP_FROM: "bounce@example.com",
                MAIL_SMTP_TIMEOUT: "2000",
            }
        )
        assert session.port == 465
        assert session.ssl_on_connect is True
        assert session.bounce_address == "bounce@example.com"
        assert session.socket_timeout_seconds == 2.0
        assert session.requires_auth is False
