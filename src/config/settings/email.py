"""Settings específicas de Email.

Defaults de ambiente para o montador de mensagens e a sessão SMTP.
Centralizar a leitura de env aqui evita que SessionConfig leia estado
global: os defaults são sempre passados explicitamente.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

# Portas e timeouts clássicos do cliente SMTP
DEFAULT_SMTP_PORT: int = 25
DEFAULT_SSL_SMTP_PORT: int = 465
DEFAULT_SOCKET_TIMEOUT_MS: int = 60_000


class EnvironmentDefaults(BaseModel):
    """Defaults de ambiente usados na resolução da sessão de envio."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    host: str = Field(
        default="",
        description="Host SMTP usado quando a configuração não define um.",
    )
    smtp_port: int = Field(
        default=DEFAULT_SMTP_PORT,
        ge=1,
        description="Porta SMTP padrão.",
    )
    ssl_smtp_port: int = Field(
        default=DEFAULT_SSL_SMTP_PORT,
        ge=1,
        description="Porta SMTP padrão para SSL na conexão.",
    )
    from_address: str = Field(
        default="",
        description="Remetente padrão quando a mensagem não define From.",
    )
    charset: str | None = Field(
        default=None,
        description="Charset padrão para novos montadores.",
    )
    debug: bool = Field(
        default=False,
        description="Ativa debug do cliente SMTP.",
    )
    socket_timeout_ms: int = Field(
        default=DEFAULT_SOCKET_TIMEOUT_MS,
        ge=0,
        description="Timeout de I/O do socket em milissegundos.",
    )
    socket_connection_timeout_ms: int = Field(
        default=DEFAULT_SOCKET_TIMEOUT_MS,
        ge=0,
        description="Timeout de conexão do socket em milissegundos.",
    )

    def validate_settings(self) -> list[str]:
        """Valida configurações mínimas de Email.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []
        if not self.host:
            errors.append("EMAIL_SMTP_HOST não configurado")
        if not self.from_address:
            errors.append("EMAIL_FROM_EMAIL não configurado")
        return errors


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _parse_bool(value: str) -> bool:
    """Converte texto de env em bool com o mesmo padrao dos outros settings."""
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _load_from_env() -> EnvironmentDefaults:
    """Carrega EnvironmentDefaults de variáveis de ambiente."""
    return EnvironmentDefaults(
        host=os.getenv("EMAIL_SMTP_HOST", ""),
        smtp_port=int(os.getenv("EMAIL_SMTP_PORT", str(DEFAULT_SMTP_PORT))),
        ssl_smtp_port=int(os.getenv("EMAIL_SSL_SMTP_PORT", str(DEFAULT_SSL_SMTP_PORT))),
        from_address=os.getenv("EMAIL_FROM_EMAIL", ""),
        charset=_read_optional_env("EMAIL_CHARSET"),
        debug=_parse_bool(os.getenv("EMAIL_DEBUG", "false")),
        socket_timeout_ms=int(
            os.getenv("EMAIL_SOCKET_TIMEOUT_MS", str(DEFAULT_SOCKET_TIMEOUT_MS))
        ),
        socket_connection_timeout_ms=int(
            os.getenv("EMAIL_SOCKET_CONNECTION_TIMEOUT_MS", str(DEFAULT_SOCKET_TIMEOUT_MS))
        ),
    )


@lru_cache(maxsize=1)
def get_environment_defaults() -> EnvironmentDefaults:
    """Retorna instância cacheada de EnvironmentDefaults."""
    return _load_from_env()


__all__ = [
    "DEFAULT_SMTP_PORT",
    "DEFAULT_SOCKET_TIMEOUT_MS",
    "DEFAULT_SSL_SMTP_PORT",
    "EnvironmentDefaults",
    "get_environment_defaults",
]
