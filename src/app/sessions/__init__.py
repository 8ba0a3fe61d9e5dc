"""Sessões de envio SMTP.

Exporta a configuração mutável e o handle congelado de sessão.
"""

from app.sessions.config import SESSION_ALREADY_INITIALIZED_MSG, SessionConfig
from app.sessions.models import DefaultAuthenticator, MailSession

__all__ = [
    "SESSION_ALREADY_INITIALIZED_MSG",
    "DefaultAuthenticator",
    "MailSession",
    "SessionConfig",
]
