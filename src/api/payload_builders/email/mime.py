"""Renderização de ComposedMessage em email.message.EmailMessage.

Headers customizados chegam dobrados (CRLF + espaço); aqui são
desdobrados para que a policy padrão refaça a dobra na serialização.
"""

from __future__ import annotations

import re
from email.message import EmailMessage
from email.utils import format_datetime, make_msgid
from typing import TYPE_CHECKING

from app.domain.email_message import BodyKind, CompositePart
from utils.errors import InvalidContentError

if TYPE_CHECKING:
    from app.domain.email_message import Address, ComposedMessage

DEFAULT_BODY_CHARSET = "utf-8"

_FOLD_BREAK = re.compile(r"(\r\n|\r|\n)(?=[ \t])")


def unfold(value: str) -> str:
    """Remove quebras de dobra preservando o espaço seguinte."""
    return _FOLD_BREAK.sub("", value)


def _join(addresses: tuple[Address, ...]) -> str:
    return ", ".join(address.formatted() for address in addresses)


def _split_type(content_type: str | None) -> tuple[str, str]:
    if not content_type:
        return "text", "plain"
    main = content_type.split(";", 1)[0].strip().lower()
    maintype, _, subtype = main.partition("/")
    return maintype or "text", subtype or "plain"


def _set_raw_body(
    msg: EmailMessage,
    body: object,
    content_type: str | None,
    charset: str,
) -> None:
    maintype, subtype = _split_type(content_type)
    if isinstance(body, str) and maintype == "text":
        msg.set_content(body, subtype=subtype, charset=charset)
        return
    if isinstance(body, str):
        body = body.encode(charset)
    if isinstance(body, (bytes, bytearray)):
        msg.set_content(bytes(body), maintype=maintype, subtype=subtype)
        return
    raise InvalidContentError(
        f"conteúdo do tipo {type(body).__name__} não pode ser renderizado"
    )


def _set_composite_body(msg: EmailMessage, part: CompositePart, charset: str) -> None:
    if part.text is not None:
        msg.set_content(part.text, charset=charset)
    if part.html is not None:
        if part.text is not None:
            msg.add_alternative(part.html, subtype="html", charset=charset)
        else:
            msg.set_content(part.html, subtype="html", charset=charset)
    if part.subtype == "alternative" and not msg.is_multipart():
        msg.make_alternative()
    for attachment in part.attachments:
        msg.add_attachment(
            attachment.data,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
        )
    if part.subtype == "mixed" and not msg.is_multipart():
        msg.make_mixed()


def _set_body(msg: EmailMessage, composed: ComposedMessage, charset: str) -> None:
    try:
        if composed.body_kind is BodyKind.COMPOSITE:
            _set_composite_body(msg, composed.body, charset)
        elif composed.body_kind is BodyKind.RAW:
            _set_raw_body(msg, composed.body, composed.content_type, charset)
        else:
            msg.set_content(composed.body or "", charset=charset)
    except (LookupError, TypeError, ValueError) as exc:
        raise InvalidContentError(
            f"corpo incompatível com {composed.content_type} (charset {charset})"
        ) from exc


def build_mime_message(composed: ComposedMessage) -> EmailMessage:
    """Renderiza a mensagem composta para serialização/envio.

    Bcc não vira header: entra apenas nos destinatários de envelope.

    Raises:
        InvalidContentError: Corpo de tipo não renderizável ou não
            representável no charset declarado
    """
    msg = EmailMessage()
    charset = composed.charset or DEFAULT_BODY_CHARSET

    _set_body(msg, composed, charset)

    msg["From"] = composed.from_address.formatted()
    if composed.to:
        msg["To"] = _join(composed.to)
    if composed.cc:
        msg["Cc"] = _join(composed.cc)
    if composed.reply_to:
        msg["Reply-To"] = _join(composed.reply_to)
    if composed.subject is not None:
        msg["Subject"] = composed.subject
    msg["Date"] = format_datetime(composed.sent_date)
    msg["Message-ID"] = make_msgid(domain=composed.from_address.domain)

    for header in composed.headers:
        value = unfold(header.value)
        if header.name in msg:
            msg.replace_header(header.name, value)
        else:
            msg[header.name] = value

    return msg


__all__ = ["build_mime_message", "unfold"]
