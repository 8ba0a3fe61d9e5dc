"""Normalização de endereços de e-mail (IDNA/Punycode).

Uso:
    from api.normalizers.email import to_transport_form, to_display_form

    to_transport_form("user@bücher.de")  # "user@xn--bcher-kva.de"
"""

from api.normalizers.email.normalizer import to_display_form, to_transport_form

__all__ = ["to_display_form", "to_transport_form"]
