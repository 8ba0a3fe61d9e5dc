"""Protocolo de autenticador SMTP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Credentials:
    """Usuário e senha para AUTH no servidor (nunca logar)."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


class AuthenticatorProtocol(Protocol):
    """Fornece credenciais quando o transporte pede autenticação."""

    def get_credentials(self) -> Credentials | None: ...
