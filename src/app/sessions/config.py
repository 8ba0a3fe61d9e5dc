"""Configuração de sessão SMTP, mutável até a primeira sessão.

SessionConfig acumula host, portas, flags TLS/SSL, timeouts, bounce e
autenticação. get_session() cria o MailSession uma única vez e
congela a configuração (CONFIGURABLE → FROZEN); depois disso qualquer
setter levanta SessionAlreadyInitializedError.

Não lê variáveis de ambiente: defaults chegam via EnvironmentDefaults.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from api.validators.email import build_address
from app.sessions.models import (
    MAIL_DEBUG,
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
    MAIL_SMTP_STARTTLS_REQUIRED,
    MAIL_SMTP_TIMEOUT,
    MAIL_SMTP_USER,
    MAIL_TRANSPORT_PROTOCOL,
    SMTP_PROTOCOL,
    DefaultAuthenticator,
    MailSession,
)
from config.settings.email import EnvironmentDefaults
from fsm import SessionConfigState, create_fsm
from utils.errors import (
    InvalidAddressError,
    MissingHostError,
    SessionAlreadyInitializedError,
    UnsupportedCharsetError,
)

if TYPE_CHECKING:
    from app.protocols.authenticator import AuthenticatorProtocol
    from app.protocols.session_directory import SessionDirectoryProtocol

logger = logging.getLogger(__name__)

SESSION_ALREADY_INITIALIZED_MSG = "A sessão de e-mail já foi inicializada"


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


class SessionConfig:
    """Parâmetros de transporte congelados na criação da sessão.

    Não é thread-safe: um único dono deve configurar e criar a sessão.
    """

    def __init__(self, defaults: EnvironmentDefaults | None = None) -> None:
        self._defaults = defaults or EnvironmentDefaults()
        self._fsm = create_fsm(
            SessionConfigState.CONFIGURABLE,
            owner_id="session_config",
        )
        self._session: MailSession | None = None
        self._host = ""
        self._smtp_port = self._defaults.smtp_port
        self._ssl_smtp_port = self._defaults.ssl_smtp_port
        self._start_tls_enabled = False
        self._start_tls_required = False
        self._ssl_on_connect = False
        self._ssl_check_server_identity = False
        self._socket_timeout_ms = self._defaults.socket_timeout_ms
        self._socket_connection_timeout_ms = self._defaults.socket_connection_timeout_ms
        self._bounce_address: str | None = None
        self._authenticator: AuthenticatorProtocol | None = None
        self._debug = self._defaults.debug
        self._send_partial = False

    # Estado

    @property
    def state(self) -> SessionConfigState:
        return self._fsm.current_state

    @property
    def is_frozen(self) -> bool:
        return self._fsm.current_state is SessionConfigState.FROZEN

    @property
    def defaults(self) -> EnvironmentDefaults:
        return self._defaults

    def _check_configurable(self) -> None:
        if not self._fsm.can_transition_to(SessionConfigState.FROZEN):
            raise SessionAlreadyInitializedError(SESSION_ALREADY_INITIALIZED_MSG)

    def _freeze(self, session: MailSession, trigger: str) -> MailSession:
        result = self._fsm.transition(
            SessionConfigState.FROZEN,
            trigger=trigger,
            metadata={"port": session.port},
        )
        if not result.success:
            raise SessionAlreadyInitializedError(SESSION_ALREADY_INITIALIZED_MSG)
        self._session = session
        logger.info(
            "mail_session_created",
            extra={
                "trigger": trigger,
                "port": session.port,
                "ssl_on_connect": session.ssl_on_connect,
                "start_tls_enabled": session.start_tls_enabled,
                "auth": session.authenticator is not None,
                "fsm": self._fsm.get_state_summary(),
                "fsm_history": self._fsm.get_history_summary(),
            },
        )
        return session

    # Setters (apenas em CONFIGURABLE)

    def set_host(self, host: str) -> None:
        self._check_configurable()
        self._host = host

    def set_smtp_port(self, port: int) -> None:
        """Define a porta SMTP.

        Raises:
            ValueError: Porta menor que 1
        """
        self._check_configurable()
        if port < 1:
            raise ValueError(f"Porta SMTP não pode ser menor que 1, recebido: {port}")
        self._smtp_port = port

    def set_ssl_smtp_port(self, port: int) -> None:
        self._check_configurable()
        if port < 1:
            raise ValueError(f"Porta SSL não pode ser menor que 1, recebido: {port}")
        self._ssl_smtp_port = port

    def set_start_tls_enabled(self, enabled: bool) -> None:
        self._check_configurable()
        self._start_tls_enabled = enabled

    def set_start_tls_required(self, required: bool) -> None:
        self._check_configurable()
        self._start_tls_required = required

    def set_ssl_on_connect(self, enabled: bool) -> None:
        self._check_configurable()
        self._ssl_on_connect = enabled

    def set_ssl_check_server_identity(self, enabled: bool) -> None:
        self._check_configurable()
        self._ssl_check_server_identity = enabled

    def set_socket_timeout(self, timeout_ms: int) -> None:
        """Timeout de I/O em ms; valores <= 0 desativam o timeout."""
        self._check_configurable()
        self._socket_timeout_ms = timeout_ms

    def set_socket_connection_timeout(self, timeout_ms: int) -> None:
        """Timeout de conexão em ms; valores <= 0 desativam o timeout."""
        self._check_configurable()
        self._socket_connection_timeout_ms = timeout_ms

    def set_bounce_address(self, email: str | None) -> None:
        """Define o endereço de bounce (envelope MAIL FROM).

        Raises:
            ValueError: Endereço inválido (encadeado ao erro de validação)
        """
        self._check_configurable()
        if email is None:
            self._bounce_address = None
            return
        try:
            address = build_address(email)
        except (InvalidAddressError, UnsupportedCharsetError) as exc:
            raise ValueError(f"Endereço de bounce inválido: {exc}") from exc
        self._bounce_address = address.addr_spec

    def set_authenticator(self, authenticator: AuthenticatorProtocol | None) -> None:
        self._check_configurable()
        self._authenticator = authenticator

    def set_authentication(self, username: str, password: str) -> None:
        """Atalho para DefaultAuthenticator com usuário e senha."""
        self.set_authenticator(DefaultAuthenticator(username, password))

    def set_debug(self, debug: bool) -> None:
        self._check_configurable()
        self._debug = debug

    def set_send_partial(self, send_partial: bool) -> None:
        self._check_configurable()
        self._send_partial = send_partial

    # Leitura

    @property
    def host(self) -> str:
        return self._host

    @property
    def smtp_port(self) -> int:
        return self._smtp_port

    @property
    def ssl_smtp_port(self) -> int:
        return self._ssl_smtp_port

    @property
    def start_tls_enabled(self) -> bool:
        return self._start_tls_enabled

    @property
    def start_tls_required(self) -> bool:
        return self._start_tls_required

    @property
    def ssl_on_connect(self) -> bool:
        return self._ssl_on_connect

    @property
    def ssl_check_server_identity(self) -> bool:
        return self._ssl_check_server_identity

    @property
    def socket_timeout_ms(self) -> int:
        return self._socket_timeout_ms

    @property
    def socket_connection_timeout_ms(self) -> int:
        return self._socket_connection_timeout_ms

    @property
    def bounce_address(self) -> str | None:
        return self._bounce_address

    @property
    def authenticator(self) -> AuthenticatorProtocol | None:
        return self._authenticator

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def send_partial(self) -> bool:
        return self._send_partial

    @property
    def session(self) -> MailSession | None:
        """Sessão já criada, sem forçar criação."""
        return self._session

    # Sessão

    def _build_properties(self, host: str) -> dict[str, str]:
        port = self._ssl_smtp_port if self._ssl_on_connect else self._smtp_port
        properties = {
            MAIL_TRANSPORT_PROTOCOL: SMTP_PROTOCOL,
            MAIL_HOST: host,
            MAIL_PORT: str(port),
            MAIL_DEBUG: _bool_text(self._debug),
        }
        if self._authenticator is not None:
            properties[MAIL_SMTP_AUTH] = "true"
        if self._ssl_on_connect:
            properties[MAIL_SMTP_SOCKET_FACTORY_PORT] = str(self._ssl_smtp_port)
            properties[MAIL_SMTP_SSL_ENABLE] = "true"
        if (
            self._ssl_on_connect or self._start_tls_enabled
        ) and self._ssl_check_server_identity:
            properties[MAIL_SMTP_SSL_CHECKSERVERIDENTITY] = "true"
        if self._start_tls_enabled:
            properties[MAIL_SMTP_STARTTLS_ENABLE] = "true"
        if self._start_tls_required:
            properties[MAIL_SMTP_STARTTLS_REQUIRED] = "true"
        if self._send_partial:
            properties[MAIL_SMTP_SEND_PARTIAL] = "true"
        if self._bounce_address is not None:
            properties[MAIL_SMTP_FROM] = self._bounce_address
        if self._socket_timeout_ms > 0:
            properties[MAIL_SMTP_TIMEOUT] = str(self._socket_timeout_ms)
        if self._socket_connection_timeout_ms > 0:
            properties[MAIL_SMTP_CONNECTIONTIMEOUT] = str(
                self._socket_connection_timeout_ms
            )
        return properties

    def get_session(self) -> MailSession:
        """Retorna a sessão, criando-a e congelando a config na 1ª chamada.

        Raises:
            MissingHostError: Sem host na config nem nos defaults
        """
        if self._session is not None:
            return self._session

        host = self._host or self._defaults.host
        if not host:
            raise MissingHostError("Nenhum host SMTP válido para a sessão de e-mail")

        properties = self._build_properties(host)
        session = MailSession(
            host=host,
            port=int(properties[MAIL_PORT]),
            ssl_on_connect=self._ssl_on_connect,
            start_tls_enabled=self._start_tls_enabled,
            start_tls_required=self._start_tls_required,
            ssl_check_server_identity=self._ssl_check_server_identity,
            socket_timeout_ms=max(self._socket_timeout_ms, 0),
            socket_connection_timeout_ms=max(self._socket_connection_timeout_ms, 0),
            bounce_address=self._bounce_address,
            debug=self._debug,
            send_partial=self._send_partial,
            authenticator=self._authenticator,
            properties=properties,
        )
        return self._freeze(session, trigger="get_session")

    def set_mail_session(self, session: MailSession) -> None:
        """Adota um handle de sessão externo e congela a configuração.

        Com mail.smtp.auth=true e usuário/senha no property bag, um
        DefaultAuthenticator é anexado; sem eles, assume que o handle
        já traz um autenticador funcional.
        """
        self._check_configurable()
        if session.requires_auth:
            username = session.get_property(MAIL_SMTP_USER)
            password = session.get_property(MAIL_SMTP_PASSWORD)
            if username and password:
                authenticator = DefaultAuthenticator(username, password)
                session = dataclasses.replace(session, authenticator=authenticator)
        self._authenticator = session.authenticator
        self._freeze(session, trigger="set_mail_session")

    def set_mail_session_from_directory(
        self,
        name: str,
        directory: SessionDirectoryProtocol,
    ) -> None:
        """Resolve a sessão por nome num diretório externo.

        Raises:
            SessionAlreadyInitializedError: Sessão já criada (sem consulta
                ao diretório)
            ValueError: Nome vazio
            MissingHostError: Property bag resolvido sem host
        """
        self._check_configurable()
        if not name:
            raise ValueError("Nome da sessão no diretório não pode ser vazio")
        properties = directory.lookup(name)
        self.set_mail_session(MailSession.from_properties(properties))

    def default_from(self) -> str | None:
        """Resolve o remetente padrão.

        Ordem: mail.smtp.from/mail.from da sessão existente, bounce
        address, EnvironmentDefaults.from_address.
        """
        if self._session is not None:
            value = self._session.get_property(MAIL_SMTP_FROM) or self._session.get_property(
                MAIL_FROM
            )
            if value:
                return value
        if self._bounce_address:
            return self._bounce_address
        return self._defaults.from_address or None


__all__ = ["SESSION_ALREADY_INITIALIZED_MSG", "SessionConfig"]
