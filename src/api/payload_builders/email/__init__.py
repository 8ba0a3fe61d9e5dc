"""Montagem de conteúdo e headers de e-mail.

Módulos:
- content: negociação content-type/charset e normalização de assunto
- headers: HeaderStore e dobra RFC 2047
- providers: provedores de corpo (texto, HTML, multipart)
- mime: renderização para email.message.EmailMessage
"""

from api.payload_builders.email.content import (
    is_plain_text,
    negotiate_content_type,
    normalize_subject,
)
from api.payload_builders.email.headers import (
    HEADER_LINE_WIDTH,
    HeaderStore,
    fold,
    fold_header_value,
)
from api.payload_builders.email.mime import build_mime_message, unfold
from api.payload_builders.email.providers import (
    HtmlContent,
    MultipartContent,
    PlainTextContent,
)

__all__ = [
    "HEADER_LINE_WIDTH",
    "HeaderStore",
    "HtmlContent",
    "MultipartContent",
    "PlainTextContent",
    "build_mime_message",
    "fold",
    "fold_header_value",
    "is_plain_text",
    "negotiate_content_type",
    "normalize_subject",
    "unfold",
]
