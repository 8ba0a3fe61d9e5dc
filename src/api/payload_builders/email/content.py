"""Negociação de content-type/charset e normalização de assunto."""

from __future__ import annotations

CHARSET_MARKER = "; charset="
TEXT_PREFIX = "text/"


def negotiate_content_type(
    content_type: str | None,
    current_charset: str | None,
) -> tuple[str | None, str | None]:
    """Deriva content-type e charset efetivos.

    Regras, em ordem:
    - Tipo vazio limpa o tipo efetivo e mantém o charset
    - Tipo com "; charset=" define o charset (até o próximo espaço)
    - Tipo text/* (prefixo em minúsculas) com charset conhecido recebe
      o parâmetro charset
    - Demais tipos passam inalterados

    Idempotente: reaplicar sobre a própria saída não duplica o charset.

    Args:
        content_type: Content-type informado pelo chamador
        current_charset: Charset já conhecido

    Returns:
        Tupla (content_type efetivo, charset efetivo)
    """
    if not content_type:
        return None, current_charset

    idx = content_type.lower().find(CHARSET_MARKER)
    if idx != -1:
        start = idx + len(CHARSET_MARKER)
        end = content_type.find(" ", start)
        charset = content_type[start:] if end == -1 else content_type[start:end]
        return content_type, charset

    if content_type.startswith(TEXT_PREFIX) and current_charset:
        return f"{content_type}{CHARSET_MARKER}{current_charset}", current_charset

    return content_type, current_charset


def normalize_subject(subject: str | None) -> str | None:
    """Troca cada CR ou LF por espaço (bloqueia injeção de header)."""
    if subject is None:
        return None
    return subject.replace("\r", " ").replace("\n", " ")


def is_plain_text(content_type: str | None) -> bool:
    """True quando o tipo é exatamente text/plain (sem parâmetros)."""
    return content_type is not None and content_type.lower() == "text/plain"


__all__ = [
    "CHARSET_MARKER",
    "is_plain_text",
    "negotiate_content_type",
    "normalize_subject",
]
