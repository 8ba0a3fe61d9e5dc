"""Protocolo de provedores de conteúdo do corpo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.email_message import ContentSpec


class ContentProviderProtocol(Protocol):
    """Produz o ContentSpec do corpo a partir do charset resolvido."""

    def produce(self, charset: str | None) -> ContentSpec: ...
