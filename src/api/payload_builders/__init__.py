"""Payload builders: montagem de conteúdo e headers de e-mail.

Estrutura:
- email/: negociação de content-type, HeaderStore, providers e MIME
"""

__all__: list[str] = []
