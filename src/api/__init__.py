"""API: camada de borda do montador de e-mails.

Responsabilidades:
- Normalizar endereços (IDNA) para forma de transporte
- Validar endereços e charsets
- Montar conteúdo, headers e renderizar MIME
- Conectar com servidores externos (SMTP, POP)

Subpastas:
- connectors/: adapters SMTP e POP-before-SMTP
- normalizers/: conversão Unicode ↔ Punycode de domínios
- payload_builders/: negociação de conteúdo, headers e MIME
- validators/: validação de endereços e charsets

NÃO PODE conter: FSM, regras de sessão, orquestração de use cases.
"""
