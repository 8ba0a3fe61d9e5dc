"""Modelo da sessão de envio (handle congelado).

MailSession é criada uma única vez a partir de SessionConfig (ou
adotada de fora) e carrega os valores resolvidos mais o property bag
com as chaves clássicas mail.smtp.*.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from app.protocols.authenticator import Credentials
from config.settings.email import DEFAULT_SMTP_PORT
from utils.errors import MissingHostError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.authenticator import AuthenticatorProtocol

# Chaves do property bag
MAIL_HOST = "mail.smtp.host"
MAIL_PORT = "mail.smtp.port"
MAIL_DEBUG = "mail.debug"
MAIL_FROM = "mail.from"
MAIL_TRANSPORT_PROTOCOL = "mail.transport.protocol"
MAIL_SMTP_AUTH = "mail.smtp.auth"
MAIL_SMTP_USER = "mail.smtp.user"
MAIL_SMTP_PASSWORD = "mail.smtp.password"
MAIL_SMTP_FROM = "mail.smtp.from"
MAIL_SMTP_TIMEOUT = "mail.smtp.timeout"
MAIL_SMTP_CONNECTIONTIMEOUT = "mail.smtp.connectiontimeout"
MAIL_SMTP_SOCKET_FACTORY_PORT = "mail.smtp.socketFactory.port"
MAIL_SMTP_SSL_ENABLE = "mail.smtp.ssl.enable"
MAIL_SMTP_SSL_CHECKSERVERIDENTITY = "mail.smtp.ssl.checkserveridentity"
MAIL_SMTP_STARTTLS_ENABLE = "mail.smtp.starttls.enable"
MAIL_SMTP_STARTTLS_REQUIRED = "mail.smtp.starttls.required"
MAIL_SMTP_SEND_PARTIAL = "mail.smtp.sendpartial"

SMTP_PROTOCOL = "smtp"


class DefaultAuthenticator:
    """Autenticador simples com usuário e senha fixos."""

    __slots__ = ("_credentials",)

    def __init__(self, username: str, password: str) -> None:
        self._credentials = Credentials(username=username, password=password)

    def get_credentials(self) -> Credentials | None:
        return self._credentials


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() == "true"


def _int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True, slots=True)
class MailSession:
    """Handle imutável de sessão consumido pelo transporte.

    Attributes:
        host: Host SMTP resolvido
        port: Porta efetiva (porta SSL quando ssl_on_connect)
        properties: Property bag somente leitura (mail.smtp.*)
        authenticator: Fornecedor de credenciais, se houver
    """

    host: str
    port: int = DEFAULT_SMTP_PORT
    ssl_on_connect: bool = False
    start_tls_enabled: bool = False
    start_tls_required: bool = False
    ssl_check_server_identity: bool = False
    socket_timeout_ms: int = 0
    socket_connection_timeout_ms: int = 0
    bounce_address: str | None = None
    debug: bool = False
    send_partial: bool = False
    authenticator: AuthenticatorProtocol | None = None
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.host:
            raise MissingHostError("sessão sem host SMTP")
        if self.port < 1:
            raise ValueError(f"porta inválida: {self.port}")
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def get_property(self, key: str, default: str | None = None) -> str | None:
        return self.properties.get(key, default)

    @property
    def requires_auth(self) -> bool:
        return _flag(self.properties.get(MAIL_SMTP_AUTH))

    @property
    def socket_timeout_seconds(self) -> float | None:
        """Timeout de I/O em segundos; None quando desativado (<= 0)."""
        if self.socket_timeout_ms <= 0:
            return None
        return self.socket_timeout_ms / 1000

    @property
    def connection_timeout_seconds(self) -> float | None:
        """Timeout de conexão em segundos; None quando desativado (<= 0)."""
        if self.socket_connection_timeout_ms <= 0:
            return None
        return self.socket_connection_timeout_ms / 1000

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, str],
        authenticator: AuthenticatorProtocol | None = None,
    ) -> MailSession:
        """Cria sessão a partir de um property bag externo.

        Raises:
            MissingHostError: Se mail.smtp.host estiver ausente
            ValueError: Se porta ou timeouts não forem inteiros
        """
        return cls(
            host=properties.get(MAIL_HOST, ""),
            port=_int(properties.get(MAIL_PORT), DEFAULT_SMTP_PORT),
            ssl_on_connect=_flag(properties.get(MAIL_SMTP_SSL_ENABLE)),
            start_tls_enabled=_flag(properties.get(MAIL_SMTP_STARTTLS_ENABLE)),
            start_tls_required=_flag(properties.get(MAIL_SMTP_STARTTLS_REQUIRED)),
            ssl_check_server_identity=_flag(
                properties.get(MAIL_SMTP_SSL_CHECKSERVERIDENTITY)
            ),
            socket_timeout_ms=_int(properties.get(MAIL_SMTP_TIMEOUT), 0),
            socket_connection_timeout_ms=_int(
                properties.get(MAIL_SMTP_CONNECTIONTIMEOUT), 0
            ),
            bounce_address=properties.get(MAIL_SMTP_FROM) or None,
            debug=_flag(properties.get(MAIL_DEBUG)),
            send_partial=_flag(properties.get(MAIL_SMTP_SEND_PARTIAL)),
            authenticator=authenticator,
            properties=properties,
        )


__all__ = [
    "MAIL_DEBUG",
    "MAIL_FROM",
    "MAIL_HOST",
    "MAIL_PORT",
    "MAIL_SMTP_AUTH",
    "MAIL_SMTP_CONNECTIONTIMEOUT",
    "MAIL_SMTP_FROM",
    "MAIL_SMTP_PASSWORD",
    "MAIL_SMTP_SEND_PARTIAL",
    "MAIL_SMTP_SOCKET_FACTORY_PORT",
    "MAIL_SMTP_SSL_CHECKSERVERIDENTITY",
    "MAIL_SMTP_SSL_ENABLE",
    "MAIL_SMTP_STARTTLS_ENABLE",
    "MAIL_SMTP_STARTTLS_REQUIRED",
    "MAIL_SMTP_TIMEOUT",
    "MAIL_SMTP_USER",
    "MAIL_TRANSPORT_PROTOCOL",
    "SMTP_PROTOCOL",
    "DefaultAuthenticator",
    "MailSession",
]
