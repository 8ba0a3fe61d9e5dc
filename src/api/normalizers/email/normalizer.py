"""Normalização de endereços entre forma Unicode e forma de transporte.

Converte apenas o domínio via codec IDNA da biblioteca padrão; a parte
local é preservada como recebida. Funções puras e totais: entradas que
não podem ser divididas em local@domínio voltam inalteradas.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _split(address: str) -> tuple[str, str] | None:
    """Divide no primeiro @; None quando não há divisão válida."""
    idx = address.find("@")
    if idx <= 0 or idx == len(address) - 1:
        return None
    return address[:idx], address[idx + 1 :]


def _domain_to_ascii(domain: str) -> str:
    return domain.encode("idna").decode("ascii")


def _domain_to_unicode(domain: str) -> str:
    if not domain.isascii():
        return domain
    return domain.encode("ascii").decode("idna")


def _convert(
    address: str,
    converter: Callable[[str], str],
    component: str,
) -> str:
    parts = _split(address)
    if parts is None:
        return address
    local, domain = parts
    try:
        converted = converter(domain)
    except UnicodeError:
        # Domínio rejeitado pelo codec: validação posterior decide
        log_fallback(logger, component, reason="idna_codec_error")
        return address
    return f"{local}@{converted}"


def to_transport_form(address: str | None) -> str | None:
    """Converte o domínio para forma ASCII (Punycode).

    Args:
        address: Endereço possivelmente com domínio Unicode

    Returns:
        Endereço com domínio ASCII, ou a própria entrada quando
        não há divisão local@domínio (None passa direto)
    """
    if address is None:
        return None
    return _convert(address, _domain_to_ascii, "idna_to_ascii")


def to_display_form(address: str | None) -> str | None:
    """Converte o domínio de Punycode para Unicode (inverso de to_transport_form)."""
    if address is None:
        return None
    return _convert(address, _domain_to_unicode, "idna_to_unicode")


__all__ = ["to_display_form", "to_transport_form"]
