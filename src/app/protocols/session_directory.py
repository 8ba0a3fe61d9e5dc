"""Protocolo de diretório de sessões nomeadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


class SessionDirectoryProtocol(Protocol):
    """Resolve o property bag (chaves mail.smtp.*) de uma sessão por nome.

    Levanta LookupError quando o nome não existe.
    """

    def lookup(self, name: str) -> Mapping[str, str]: ...
