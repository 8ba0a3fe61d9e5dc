"""App: orquestração do montador e do envio de e-mails.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: tipos imutáveis da mensagem
- use_cases/: casos de uso (envio)
- services/: MessageAssembler (builder one-shot)
- protocols/: contratos/interfaces de colaboradores externos
- sessions/: SessionConfig e MailSession
- observability/: correlation_id e métricas

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
