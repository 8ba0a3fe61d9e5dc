"""Modelos de domínio da mensagem de e-mail.

Tipos imutáveis compartilhados entre validadores, montador e transporte.
Nenhum desses objetos conhece detalhes de SMTP.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - usado em runtime pelo dataclass
from email.utils import formataddr
from enum import StrEnum
from typing import Any

DEFAULT_NAME_CHARSET = "utf-8"


class AddressRole(StrEnum):
    """Papel de um endereço na mensagem."""

    FROM = "From"
    TO = "To"
    CC = "Cc"
    BCC = "Bcc"
    REPLY_TO = "Reply-To"


class BodyKind(StrEnum):
    """Como o corpo foi resolvido no compose()."""

    TEXT = "text"
    RAW = "raw"
    COMPOSITE = "composite"


@dataclass(frozen=True, slots=True)
class Address:
    """Endereço validado.

    Construído apenas via api.validators.email.build_address; nunca
    existe em estado inválido.

    Attributes:
        local_part: Parte local (antes do @), mantida como recebida
        domain: Domínio em forma ASCII (Punycode quando IDN)
        display_name: Nome de exibição opcional
        name_charset: Charset usado para codificar o nome (RFC 2047)
    """

    local_part: str
    domain: str
    display_name: str | None = None
    name_charset: str | None = None

    def __post_init__(self) -> None:
        if not self.local_part:
            raise ValueError("local_part não pode ser vazio")
        if not self.domain:
            raise ValueError("domain não pode ser vazio")

    @property
    def addr_spec(self) -> str:
        """Endereço puro no formato local@domain."""
        return f"{self.local_part}@{self.domain}"

    def formatted(self) -> str:
        """Forma de header, com nome codificado se não for ASCII."""
        if not self.display_name:
            return self.addr_spec
        pair = (self.display_name, self.addr_spec)
        try:
            return formataddr(pair, charset=self.name_charset or DEFAULT_NAME_CHARSET)
        except UnicodeError:
            # Nome fora do charset declarado: codifica em UTF-8
            return formataddr(pair, charset=DEFAULT_NAME_CHARSET)

    def __str__(self) -> str:
        return self.formatted()


@dataclass(frozen=True, slots=True)
class HeaderEntry:
    """Par nome/valor de header."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Attachment:
    """Anexo de uma mensagem multipart/mixed."""

    filename: str
    content_type: str
    data: bytes

    @property
    def maintype(self) -> str:
        return self.content_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        parts = self.content_type.split("/", 1)
        return parts[1] if len(parts) > 1 else "octet-stream"


@dataclass(frozen=True, slots=True)
class CompositePart:
    """Corpo composto (multipart) ainda não renderizado.

    Attributes:
        subtype: Subtipo multipart (alternative, mixed, ...)
        text: Parte text/plain opcional
        html: Parte text/html opcional
        attachments: Anexos na ordem de inserção
    """

    subtype: str
    text: str | None = None
    html: str | None = None
    attachments: tuple[Attachment, ...] = ()

    @property
    def content_type(self) -> str:
        return f"multipart/{self.subtype}"


@dataclass(frozen=True, slots=True)
class ContentSpec:
    """Conteúdo declarado para o corpo.

    No máximo um entre raw e composite pode estar definido; nenhum
    dos dois significa corpo ausente.
    """

    content_type: str | None = None
    charset: str | None = None
    raw: Any = None
    composite: CompositePart | None = None

    def __post_init__(self) -> None:
        if self.raw is not None and self.composite is not None:
            raise ValueError("ContentSpec aceita raw ou composite, não ambos")

    @property
    def is_absent(self) -> bool:
        return self.raw is None and self.composite is None


@dataclass(frozen=True, slots=True)
class ComposedMessage:
    """Artefato final e imutável produzido por compose().

    Attributes:
        from_address: Remetente resolvido (explícito ou default da sessão)
        to/cc/bcc/reply_to: Listas de endereços na ordem de inserção
        subject: Assunto já normalizado (sem quebras de linha)
        content_type: Content-type efetivo (com charset quando text/*)
        charset: Charset efetivo
        body_kind: Ramo que resolveu o corpo
        body: Texto, objeto bruto ou CompositePart
        headers: Headers customizados já dobrados
        sent_date: Data de envio congelada no compose()
        from_is_default: True quando o remetente veio da sessão
    """

    from_address: Address
    to: tuple[Address, ...]
    cc: tuple[Address, ...]
    bcc: tuple[Address, ...]
    reply_to: tuple[Address, ...]
    subject: str | None
    content_type: str | None
    charset: str | None
    body_kind: BodyKind
    body: Any
    sent_date: datetime
    headers: tuple[HeaderEntry, ...] = field(default_factory=tuple)
    from_is_default: bool = False

    @property
    def recipients(self) -> tuple[Address, ...]:
        """Destinatários de envelope: To + Cc + Bcc."""
        return self.to + self.cc + self.bcc

    @property
    def recipient_count(self) -> int:
        return len(self.recipients)

    def addresses_for(self, role: AddressRole) -> tuple[Address, ...]:
        """Retorna endereços de um papel (From como tupla unitária)."""
        if role is AddressRole.FROM:
            return (self.from_address,)
        mapping = {
            AddressRole.TO: self.to,
            AddressRole.CC: self.cc,
            AddressRole.BCC: self.bcc,
            AddressRole.REPLY_TO: self.reply_to,
        }
        return mapping[role]


__all__ = [
    "Address",
    "AddressRole",
    "Attachment",
    "BodyKind",
    "ComposedMessage",
    "CompositePart",
    "ContentSpec",
    "HeaderEntry",
]
