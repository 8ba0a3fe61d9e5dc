"""HeaderStore e dobra (folding) de headers customizados.

Valores ficam armazenados sem dobra; a codificação RFC 2047 e a quebra
em linhas de até 76 caracteres acontecem só na emissão.
"""

from __future__ import annotations

import itertools
import logging
import re
from email.charset import Charset
from email.errors import CharsetError
from typing import TYPE_CHECKING

from app.domain.email_message import HeaderEntry
from config.logging import log_fallback
from utils.errors import InvalidHeaderError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

HEADER_LINE_WIDTH = 76
ENCODED_WORD_MAX = 75
DEFAULT_HEADER_CHARSET = "utf-8"

_WSP = (" ", "\t")
_LINE_BREAKS = ("\r", "\n")
# RFC 5322 field-name: ASCII imprimível exceto ":"
_FIELD_NAME = re.compile(r"[!-9;-~]+")


def _encode_words(value: str, charset: str | None) -> str:
    """Codifica o valor em encoded-words RFC 2047 separadas por espaço."""
    cs = Charset(charset or DEFAULT_HEADER_CHARSET)
    if cs.header_encoding is None:
        raise LookupError(f"charset sem codificação de header: {cs}")
    words = cs.header_encode_lines(value, itertools.repeat(ENCODED_WORD_MAX))
    return " ".join(words)


def _make_safe(value: str) -> str:
    """Garante que toda quebra de linha seja seguida de espaço."""
    if not any(c in value for c in _LINE_BREAKS):
        return value
    out: list[str] = []
    size = len(value)
    i = 0
    while i < size:
        c = value[i]
        out.append(c)
        if c == "\r" and i + 1 < size and value[i + 1] == "\n":
            i += 1
            out.append("\n")
            c = "\n"
        if c in _LINE_BREAKS and i + 1 < size and value[i + 1] not in _WSP:
            out.append(" ")
        i += 1
    return "".join(out)


def fold(used: int, value: str) -> str:
    """Quebra o valor em espaços para caber em HEADER_LINE_WIDTH.

    Args:
        used: Caracteres já ocupados na primeira linha (ex: "Nome: ")
        value: Valor a dobrar

    Returns:
        Valor com quebras CRLF seguidas do caractere de espaço original.
        Palavras maiores que a linha ficam inteiras.
    """
    value = value.rstrip(" \t\r\n")
    if used + len(value) <= HEADER_LINE_WIDTH:
        return _make_safe(value)

    out: list[str] = []
    last_char = ""
    while used + len(value) > HEADER_LINE_WIDTH:
        last_space = -1
        for i, c in enumerate(value):
            if last_space != -1 and used + i > HEADER_LINE_WIDTH:
                break
            if c in _WSP and last_char not in _WSP:
                last_space = i
            last_char = c
        if last_space == -1:
            # Sem espaço disponível: mantém o restante numa linha só
            break
        out.append(value[:last_space])
        out.append("\r\n")
        last_char = value[last_space]
        out.append(last_char)
        value = value[last_space + 1 :]
        used = 1
    out.append(value)
    return _make_safe("".join(out))


def fold_header_value(name: str, value: str, charset: str | None = None) -> str:
    """Codifica (RFC 2047) e dobra um valor de header.

    Valores ASCII não são codificados. Se o charset não tiver codec
    ou não representar o valor, usa o valor bruto e registra fallback.
    Nunca levanta exceção por causa de codificação.
    """
    encoded = value
    if not value.isascii():
        try:
            encoded = _encode_words(value, charset)
        except (CharsetError, LookupError, UnicodeError):
            log_fallback(logger, "header_folding", reason="unsupported_charset")
            encoded = value
    return fold(len(name) + 2, encoded)


def _require_text(field: str, text: str | None) -> str:
    if text is None or text == "":
        raise InvalidHeaderError(f"header {field} não pode ser vazio")
    return text


class HeaderStore:
    """Mapa ordenado nome→valor de headers customizados.

    Nome é chave única: a última escrita vence. Não é thread-safe.
    """

    __slots__ = ("_headers",)

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}

    def set(self, name: str | None, value: str | None) -> None:
        """Define um header.

        Raises:
            InvalidHeaderError: Nome ou valor vazio, ou nome fora do
                formato field-name (store inalterado)
        """
        checked_name = _require_text("name", name)
        if not _FIELD_NAME.fullmatch(checked_name):
            raise InvalidHeaderError(f"nome de header inválido: {checked_name!r}")
        checked_value = _require_text("value", value)
        self._headers[checked_name] = checked_value

    def set_all(self, headers: Mapping[str, str]) -> None:
        """Limpa o store e aplica cada par na ordem do mapping.

        Um par inválido interrompe a aplicação com o store já limpo.
        """
        self._headers.clear()
        for name, value in headers.items():
            self.set(name, value)

    def get(self, name: str) -> str | None:
        return self._headers.get(name)

    def all(self) -> dict[str, str]:
        """Cópia dos headers na ordem de inserção."""
        return dict(self._headers)

    def folded(self, charset: str | None) -> tuple[HeaderEntry, ...]:
        """Dobra todos os headers com o charset resolvido."""
        return tuple(
            HeaderEntry(name=name, value=fold_header_value(name, value, charset))
            for name, value in self._headers.items()
        )

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, name: object) -> bool:
        return name in self._headers


__all__ = [
    "HEADER_LINE_WIDTH",
    "HeaderStore",
    "fold",
    "fold_header_value",
]
