"""Transporte SMTP de referência sobre smtplib.

Conecta (SSL direto ou STARTTLS), autentica via authenticator da sessão
e envia o envelope manualmente (MAIL/RCPT/DATA) para respeitar
send_partial: sem ele, qualquer destinatário recusado aborta antes do
DATA (RSET). Nunca faz retry.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email import policy
from typing import TYPE_CHECKING

from api.payload_builders.email import build_mime_message
from app.observability import get_correlation_id, record_delivery
from utils.errors import TransportFailureError

if TYPE_CHECKING:
    from collections.abc import Callable
    from email.message import EmailMessage

    from app.domain.email_message import ComposedMessage
    from app.sessions.models import MailSession

logger = logging.getLogger(__name__)

SEND_FAILURE_MSG = "Sending the email to the following server failed"
STARTTLS_UNSUPPORTED_MSG = "Servidor não suporta STARTTLS exigido pela sessão"

_ACCEPTED_RCPT_CODES = (250, 251)


class SmtpTransport:
    """Implementa TransportProtocol com smtplib.

    Args:
        smtp_factory: Construtor de conexão SMTP simples
        smtp_ssl_factory: Construtor de conexão SMTP com SSL direto
        ssl_context_factory: Fábrica do contexto TLS
    """

    def __init__(
        self,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
        smtp_ssl_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP_SSL,
        ssl_context_factory: Callable[[], ssl.SSLContext] = ssl.create_default_context,
    ) -> None:
        self._smtp_factory = smtp_factory
        self._smtp_ssl_factory = smtp_ssl_factory
        self._ssl_context_factory = ssl_context_factory
        self._last_refused: dict[str, tuple[int, bytes]] = {}

    @property
    def last_refused(self) -> dict[str, tuple[int, bytes]]:
        """Destinatários recusados no último envio parcial."""
        return dict(self._last_refused)

    def _ssl_context(self, session: MailSession) -> ssl.SSLContext:
        context = self._ssl_context_factory()
        if not session.ssl_check_server_identity:
            context.check_hostname = False
        return context

    def _connect(self, session: MailSession) -> smtplib.SMTP:
        timeout = session.connection_timeout_seconds
        if session.ssl_on_connect:
            return self._smtp_ssl_factory(
                session.host,
                session.port,
                timeout=timeout,
                context=self._ssl_context(session),
            )
        return self._smtp_factory(session.host, session.port, timeout=timeout)

    def _start_tls(self, client: smtplib.SMTP, session: MailSession) -> None:
        client.ehlo()
        if not (session.start_tls_enabled or session.start_tls_required):
            return
        if client.has_extn("starttls"):
            client.starttls(context=self._ssl_context(session))
            client.ehlo()
            return
        if session.start_tls_required:
            raise TransportFailureError(
                STARTTLS_UNSUPPORTED_MSG,
                host=session.host,
                port=session.port,
            )

    @staticmethod
    def _login(client: smtplib.SMTP, session: MailSession) -> None:
        if session.authenticator is None:
            return
        credentials = session.authenticator.get_credentials()
        if credentials is not None:
            client.login(credentials.username, credentials.password)

    @staticmethod
    def _send_envelope(
        client: smtplib.SMTP,
        envelope_from: str,
        recipients: list[str],
        payload: bytes,
        send_partial: bool,
    ) -> dict[str, tuple[int, bytes]]:
        client.ehlo_or_helo_if_needed()
        code, response = client.mail(envelope_from)
        if code != 250:
            client.rset()
            raise smtplib.SMTPSenderRefused(code, response, envelope_from)

        refused: dict[str, tuple[int, bytes]] = {}
        for recipient in recipients:
            code, response = client.rcpt(recipient)
            if code not in _ACCEPTED_RCPT_CODES:
                refused[recipient] = (code, response)

        if len(refused) == len(recipients) or (refused and not send_partial):
            client.rset()
            raise smtplib.SMTPRecipientsRefused(refused)

        code, response = client.data(payload)
        if code != 250:
            client.rset()
            raise smtplib.SMTPDataError(code, response)
        return refused

    @staticmethod
    def _serialize(mime: EmailMessage) -> bytes:
        return mime.as_bytes(policy=policy.SMTP)

    def deliver(self, message: ComposedMessage, session: MailSession) -> str:
        """Entrega a mensagem e retorna o Message-ID.

        Raises:
            TransportFailureError: Falha de conexão, autenticação,
                STARTTLS exigido ou destinatários recusados
        """
        mime = build_mime_message(message)
        message_id = str(mime["Message-ID"])
        envelope_from = session.bounce_address or message.from_address.addr_spec
        recipients = [address.addr_spec for address in message.recipients]
        self._last_refused = {}

        try:
            with self._connect(session) as client:
                client.set_debuglevel(1 if session.debug else 0)
                if client.sock is not None:
                    client.sock.settimeout(session.socket_timeout_seconds)
                if not session.ssl_on_connect:
                    self._start_tls(client, session)
                self._login(client, session)
                refused = self._send_envelope(
                    client,
                    envelope_from,
                    recipients,
                    self._serialize(mime),
                    session.send_partial,
                )
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning(
                "smtp_delivery_failed",
                extra={
                    "port": session.port,
                    "error_type": type(exc).__name__,
                    "recipient_count": len(recipients),
                },
            )
            record_delivery("failed", len(recipients), correlation_id=get_correlation_id() or None)
            raise TransportFailureError(
                SEND_FAILURE_MSG,
                host=session.host,
                port=session.port,
            ) from exc

        if refused:
            self._last_refused = refused
            logger.warning(
                "smtp_recipients_refused",
                extra={
                    "refused_count": len(refused),
                    "recipient_count": len(recipients),
                },
            )
            record_delivery(
                "partial",
                len(recipients),
                refused_count=len(refused),
                correlation_id=get_correlation_id() or None,
            )
        else:
            record_delivery("sent", len(recipients), correlation_id=get_correlation_id() or None)
        return message_id


__all__ = ["SEND_FAILURE_MSG", "SmtpTransport"]
