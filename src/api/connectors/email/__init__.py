"""Connector Email: adapters SMTP e POP-before-SMTP.

Uso:
    from api.connectors.email import SmtpTransport

    message_id = SmtpTransport().deliver(composed, session)
"""

from api.connectors.email.pop import POP3_DEFAULT_PORT, Pop3PreAuthenticator
from api.connectors.email.smtp_transport import SEND_FAILURE_MSG, SmtpTransport

__all__ = [
    "POP3_DEFAULT_PORT",
    "SEND_FAILURE_MSG",
    "Pop3PreAuthenticator",
    "SmtpTransport",
]
