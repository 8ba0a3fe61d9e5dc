"""Normalizers: conversão de endereços para forma de transporte.

Estrutura:
- email/: IDNA/Punycode no domínio, parte local preservada
"""

from .email import to_display_form, to_transport_form

__all__ = [
    "to_display_form",
    "to_transport_form",
]
