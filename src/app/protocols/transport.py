"""Protocolo de transporte de mensagens compostas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.email_message import ComposedMessage
    from app.sessions.models import MailSession


class TransportProtocol(Protocol):
    """Contrato mínimo para entregar uma mensagem composta.

    Implementações devolvem o identificador atribuído à mensagem e
    levantam TransportFailureError em falha de rede/protocolo.
    """

    def deliver(self, message: ComposedMessage, session: MailSession) -> str: ...
