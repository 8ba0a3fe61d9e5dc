"""Construção e validação de endereços de e-mail.

Fluxo de build_address:
1. Separa nome de exibição e addr-spec ("Nome <a@b.com>" é aceito)
2. Converte o domínio para forma de transporte (IDNA)
3. Resolve o charset do nome, se informado
4. Checa a gramática RFC 5322 via email-validator, sem DNS

Nunca produz Address inválido: qualquer falha levanta exceção.
"""

from __future__ import annotations

import codecs
from email.utils import parseaddr

from email_validator import EmailNotValidError, validate_email

from api.normalizers.email import to_transport_form
from app.domain.email_message import Address
from utils.errors import InvalidAddressError, UnsupportedCharsetError


def resolve_charset(charset: str | None) -> str | None:
    """Valida que o charset corresponde a um codec conhecido.

    Preserva a grafia do chamador ("UTF-8" continua "UTF-8").

    Raises:
        UnsupportedCharsetError: Se não existir codec para o nome
    """
    if charset is None:
        return None
    name = charset.strip()
    if not name:
        raise UnsupportedCharsetError("charset vazio")
    try:
        codecs.lookup(name)
    except LookupError as exc:
        raise UnsupportedCharsetError(f"charset não suportado: {name}") from exc
    return name


def build_address(
    raw_email: str | None,
    display_name: str | None = None,
    name_charset: str | None = None,
) -> Address:
    """Cria Address validado a partir de string livre.

    Args:
        raw_email: Endereço, opcionalmente no formato "Nome <addr>"
        display_name: Nome explícito (tem precedência sobre o parseado)
        name_charset: Charset para codificar o nome (RFC 2047)

    Returns:
        Address imutável com domínio em forma ASCII

    Raises:
        InvalidAddressError: Endereço vazio ou fora da gramática
        UnsupportedCharsetError: name_charset sem codec
    """
    if raw_email is None or not raw_email.strip():
        raise InvalidAddressError("endereço vazio")

    parsed_name, addr_spec = parseaddr(raw_email.strip())
    if not addr_spec:
        raise InvalidAddressError("endereço não pôde ser interpretado")

    transport = to_transport_form(addr_spec)
    charset = resolve_charset(name_charset)

    try:
        validate_email(
            transport,
            allow_smtputf8=False,
            allow_quoted_local=True,
            allow_domain_literal=True,
            check_deliverability=False,
            globally_deliverable=False,
        )
    except EmailNotValidError as exc:
        raise InvalidAddressError(f"endereço inválido: {exc}") from exc

    local_part, _, domain = transport.rpartition("@")
    name = display_name or parsed_name or None
    return Address(
        local_part=local_part,
        domain=domain,
        display_name=name,
        name_charset=charset,
    )


__all__ = ["build_address", "resolve_charset"]
