"""Validators: validação de endereços e charsets de e-mail.

Estrutura:
- email/: build_address e resolve_charset
"""

__all__: list[str] = []
