"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto, exceto o
POP-before-SMTP delegado). Implementações concretas de IO ficam em
api/connectors/.
"""

from app.services.message_assembler import (
    INVALID_ADDRESS_LIST_MSG,
    MessageAssembler,
)

__all__ = [
    "INVALID_ADDRESS_LIST_MSG",
    "MessageAssembler",
]
