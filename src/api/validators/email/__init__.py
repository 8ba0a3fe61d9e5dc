"""Validadores de endereço de e-mail.

Uso:
    from api.validators.email import build_address

    address = build_address("a@b.com", "Fulano", "UTF-8")
"""

from api.validators.email.address import build_address, resolve_charset

__all__ = ["build_address", "resolve_charset"]
