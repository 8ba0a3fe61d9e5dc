"""Filters de logging para injeção de contexto e redação de PII.

Campos injetados:
- correlation_id: ID de rastreamento do envio
- service: Nome do serviço (ex: remessa)

Endereços de e-mail são PII: RedactAddressFilter mascara qualquer
endereço que escape para a mensagem formatada.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_ADDRESS_PATTERN = re.compile(r"([^\s<>\"'@,;:]+)@([^\s<>\"',;:]+)")


def mask_address(match: re.Match[str]) -> str:
    """Mantém só o primeiro caractere da parte local e o domínio."""
    local, domain = match.group(1), match.group(2)
    return f"{local[:1]}***@{domain}"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class RedactAddressFilter(logging.Filter):
    """Mascara endereços de e-mail na mensagem final do record.

    A mensagem é formatada uma vez e os args são descartados, então
    o handler recebe apenas o texto já redigido.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _ADDRESS_PATTERN.sub(mask_address, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
