"""Use cases de e-mail."""

from .send_email import SendEmailResult, SendEmailUseCase

__all__ = [
    "SendEmailResult",
    "SendEmailUseCase",
]
