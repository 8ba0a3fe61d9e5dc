"""Correlation_id para rastrear um envio de ponta a ponta.

Cada execução de SendEmailUseCase abre um escopo com um ID próprio;
o CorrelationIdFilter injeta esse ID em todos os logs do escopo.
Usa ContextVar para ser thread/async-safe.

Uso:
    from app.observability import correlation_scope, get_correlation_id

    with correlation_scope() as correlation_id:
        ...  # logs aqui carregam correlation_id
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Abre escopo com correlation_id; reutiliza o atual se já existir.

    Yields:
        correlation_id ativo dentro do escopo
    """
    current = get_correlation_id()
    if current and correlation_id is None:
        yield current
        return
    token = set_correlation_id(correlation_id)
    try:
        yield get_correlation_id()
    finally:
        reset_correlation_id(token)
