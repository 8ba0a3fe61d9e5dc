"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas (SMTP, POP) aos protocolos.

Uso:
    from app.bootstrap import initialize_app, create_message_assembler

    # Na inicialização do serviço
    initialize_app()

    assembler = create_message_assembler()
    use_case = create_send_email_use_case()
"""

from __future__ import annotations

import logging
from functools import lru_cache

from api.connectors.email import Pop3PreAuthenticator, SmtpTransport
from app.observability import get_correlation_id
from app.services.message_assembler import MessageAssembler
from app.sessions.config import SessionConfig
from app.use_cases.email import SendEmailUseCase
from config.logging import configure_logging
from config.settings import (
    BaseSettings,
    EnvironmentDefaults,
    get_base_settings,
    get_environment_defaults,
)

logger = logging.getLogger(__name__)


def initialize_app(settings: BaseSettings | None = None) -> None:
    """Inicializa a aplicação.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado JSON com correlation_id
    - Validação de settings (estrita em staging/production)
    """
    base = settings or get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )
    validate_runtime_settings(base)


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (DEBUG, sem validação)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings(
    settings: BaseSettings | None = None,
    email_defaults: EnvironmentDefaults | None = None,
) -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = settings or get_base_settings()
    defaults = email_defaults or get_environment_defaults()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"email: {error}" for error in defaults.validate_settings())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.is_strict:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# Factories


def create_session_config(defaults: EnvironmentDefaults | None = None) -> SessionConfig:
    """Cria SessionConfig com os defaults de ambiente explícitos."""
    return SessionConfig(defaults or get_environment_defaults())


def create_message_assembler(
    defaults: EnvironmentDefaults | None = None,
) -> MessageAssembler:
    """Cria montador com sessão própria e POP-before-SMTP via poplib."""
    resolved = defaults or get_environment_defaults()
    session_config = create_session_config(resolved)
    return MessageAssembler(
        session_config,
        defaults=resolved,
        pop_authenticator=Pop3PreAuthenticator(
            timeout_ms=resolved.socket_connection_timeout_ms,
        ),
    )


@lru_cache(maxsize=1)
def get_transport() -> SmtpTransport:
    """Obtém transporte SMTP (singleton)."""
    return SmtpTransport()


def create_send_email_use_case(
    transport: SmtpTransport | None = None,
) -> SendEmailUseCase:
    """Cria use case de envio com o transporte SMTP padrão."""
    return SendEmailUseCase(transport or get_transport())


__all__ = [
    "create_message_assembler",
    "create_send_email_use_case",
    "create_session_config",
    "get_transport",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
