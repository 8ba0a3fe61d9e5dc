"""Use case de envio: compõe (se preciso), cria a sessão e entrega."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.email import SEND_FAILURE_MSG
from app.observability import correlation_scope, record_latency
from utils.errors import TransportFailureError

if TYPE_CHECKING:
    from app.protocols.transport import TransportProtocol
    from app.services.message_assembler import MessageAssembler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SendEmailResult:
    """Resultado de um envio bem-sucedido."""

    message_id: str
    correlation_id: str
    recipient_count: int


class SendEmailUseCase:
    """Orquestra compose → sessão → transporte, sem retry."""

    def __init__(self, transport: TransportProtocol) -> None:
        self._transport = transport

    def execute(self, assembler: MessageAssembler) -> SendEmailResult:
        """Executa o envio.

        Erros de validação do compose() e da sessão sobem como estão.
        Falhas do transporte que não sejam TransportFailureError são
        encapsuladas com host e porta da sessão.

        Raises:
            EmailError: Validação (From, destinatários, host)
            TransportFailureError: Falha de entrega
        """
        with correlation_scope() as correlation_id:
            start = time.perf_counter()
            composed = assembler.composed or assembler.compose()
            session = assembler.get_session()
            try:
                message_id = self._transport.deliver(composed, session)
            except TransportFailureError:
                raise
            except Exception as exc:
                raise TransportFailureError(
                    SEND_FAILURE_MSG,
                    host=session.host,
                    port=session.port,
                ) from exc
            finally:
                latency_ms = (time.perf_counter() - start) * 1000
                record_latency("send_email", "execute", latency_ms, correlation_id)

            logger.info(
                "email_sent",
                extra={
                    "recipient_count": composed.recipient_count,
                    "port": session.port,
                    "correlation_id": correlation_id,
                },
            )
            return SendEmailResult(
                message_id=message_id,
                correlation_id=correlation_id,
                recipient_count=composed.recipient_count,
            )
