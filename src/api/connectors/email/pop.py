"""Pré-autenticação POP-before-SMTP via poplib."""

from __future__ import annotations

import logging
import poplib
from typing import TYPE_CHECKING

from utils.errors import TransportFailureError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

POP3_DEFAULT_PORT = 110
POP_FAILURE_MSG = "Falha na pré-autenticação POP-before-SMTP"


class Pop3PreAuthenticator:
    """Autentica (USER/PASS) num servidor POP3 e encerra a sessão.

    Args:
        port: Porta POP3
        timeout_ms: Timeout de conexão em ms (<= 0 desativa)
        pop_factory: Construtor do cliente (injetável em testes)
    """

    def __init__(
        self,
        port: int = POP3_DEFAULT_PORT,
        timeout_ms: int = 0,
        pop_factory: Callable[..., poplib.POP3] = poplib.POP3,
    ) -> None:
        self._port = port
        self._timeout = timeout_ms / 1000 if timeout_ms > 0 else None
        self._pop_factory = pop_factory

    def authenticate(self, host: str, username: str, password: str) -> None:
        """Executa USER/PASS e QUIT.

        Raises:
            TransportFailureError: Falha de rede ou credencial recusada,
                com host e porta POP
        """
        try:
            client = self._pop_factory(host, self._port, timeout=self._timeout)
            try:
                client.user(username)
                client.pass_(password)
            finally:
                client.quit()
        except (poplib.error_proto, OSError) as exc:
            logger.warning(
                "pop_before_smtp_failed",
                extra={"port": self._port, "error_type": type(exc).__name__},
            )
            raise TransportFailureError(POP_FAILURE_MSG, host=host, port=self._port) from exc

        logger.info("pop_before_smtp_authenticated", extra={"port": self._port})


__all__ = ["POP3_DEFAULT_PORT", "Pop3PreAuthenticator"]
