"""Exceções de domínio do montador de e-mails.

Três famílias:
- EmailError: falhas de validação, sempre síncronas para o chamador.
- LifecycleError: uso indevido do ciclo de vida (erro de programação).
- InfrastructureError: falhas de transporte/rede, nunca retentadas aqui.
"""

from __future__ import annotations


class EmailError(Exception):
    """Base para erros de montagem/validação de e-mail."""


class InvalidAddressError(EmailError):
    """Endereço malformado ou reprovado na checagem de sintaxe."""


class UnsupportedCharsetError(EmailError):
    """Charset informado não corresponde a nenhum codec conhecido."""


class MissingFromError(EmailError):
    """Nenhum remetente definido nem resolvível pela sessão."""


class NoRecipientsError(EmailError):
    """Mensagem sem nenhum destinatário To/Cc/Bcc."""


class InvalidHeaderError(EmailError):
    """Header com nome ou valor vazio."""


class InvalidContentError(EmailError):
    """Conteúdo de corpo inválido (ex: texto vazio)."""


class MissingHostError(EmailError):
    """Nenhum host SMTP configurado para criar a sessão."""


class LifecycleError(RuntimeError):
    """Base para violações de ciclo de vida (não recuperáveis)."""


class AlreadyComposedError(LifecycleError):
    """compose() chamado mais de uma vez no mesmo montador."""


class SessionAlreadyInitializedError(LifecycleError):
    """Setter de sessão chamado depois da sessão ter sido criada."""


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class TransportFailureError(InfrastructureError):
    """Falha ao entregar mensagem ao transporte externo.

    Attributes:
        host: Host do servidor envolvido na falha
        port: Porta do servidor envolvido na falha
    """

    def __init__(
        self,
        message: str,
        host: str | None = None,
        port: int | str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        if host is not None:
            message = f"{message} : {host}:{port}"
        super().__init__(message)
