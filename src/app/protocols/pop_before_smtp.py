"""Protocolo de pré-autenticação POP-before-SMTP."""

from __future__ import annotations

from typing import Protocol


class PopBeforeSmtpProtocol(Protocol):
    """Autentica num servidor POP antes do envio SMTP.

    Chamada bloqueante; falhas devem sair como exceção.
    """

    def authenticate(self, host: str, username: str, password: str) -> None: ...
