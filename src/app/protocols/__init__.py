"""Protocolos e contratos do core da aplicação."""

from .authenticator import AuthenticatorProtocol, Credentials
from .content_provider import ContentProviderProtocol
from .pop_before_smtp import PopBeforeSmtpProtocol
from .session_directory import SessionDirectoryProtocol
from .transport import TransportProtocol

__all__ = [
    "AuthenticatorProtocol",
    "ContentProviderProtocol",
    "Credentials",
    "PopBeforeSmtpProtocol",
    "SessionDirectoryProtocol",
    "TransportProtocol",
]
