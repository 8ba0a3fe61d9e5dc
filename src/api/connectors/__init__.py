"""Connectors: adapters de borda para servidores de e-mail.

Estrutura:
- email/: transporte SMTP (smtplib) e POP-before-SMTP (poplib)

Cada adapter implementa um protocolo de app/protocols.
"""

__all__: list[str] = []
