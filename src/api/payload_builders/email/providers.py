"""Provedores de conteúdo (texto, HTML alternativo, multipart com anexos).

Cada provider produz um ContentSpec a partir do charset do montador.
O montador não conhece subtipos de mensagem: recebe um provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.email_message import Attachment, CompositePart, ContentSpec
from utils.errors import InvalidContentError

if TYPE_CHECKING:
    from collections.abc import Iterable

TEXT_PLAIN = "text/plain"


class PlainTextContent:
    """Corpo text/plain simples."""

    __slots__ = ("_text",)

    def __init__(self, text: str) -> None:
        if not text:
            raise InvalidContentError("texto do corpo não pode ser vazio")
        self._text = text

    def produce(self, charset: str | None) -> ContentSpec:
        return ContentSpec(content_type=TEXT_PLAIN, charset=charset, raw=self._text)


class HtmlContent:
    """Corpo multipart/alternative com HTML e texto alternativo opcional."""

    __slots__ = ("_html", "_text")

    def __init__(self, html: str, text: str | None = None) -> None:
        if not html:
            raise InvalidContentError("HTML do corpo não pode ser vazio")
        self._html = html
        self._text = text or None

    def produce(self, charset: str | None) -> ContentSpec:
        part = CompositePart(subtype="alternative", text=self._text, html=self._html)
        return ContentSpec(charset=charset, composite=part)


class MultipartContent:
    """Corpo multipart/mixed com texto opcional e anexos."""

    __slots__ = ("_attachments", "_text")

    def __init__(
        self,
        text: str | None = None,
        attachments: Iterable[Attachment] = (),
    ) -> None:
        self._text = text or None
        self._attachments = tuple(attachments)
        if self._text is None and not self._attachments:
            raise InvalidContentError("multipart exige texto ou ao menos um anexo")
        for attachment in self._attachments:
            if not attachment.filename:
                raise InvalidContentError("anexo sem nome de arquivo")

    def produce(self, charset: str | None) -> ContentSpec:
        part = CompositePart(
            subtype="mixed",
            text=self._text,
            attachments=self._attachments,
        )
        return ContentSpec(charset=charset, composite=part)


__all__ = ["HtmlContent", "MultipartContent", "PlainTextContent"]
