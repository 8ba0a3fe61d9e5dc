"""Registro de métricas via structured logging.

As métricas saem como logs estruturados e podem ser agregadas depois
(BigQuery, CloudWatch Insights, etc.). Nunca carregam endereços.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Entrega: resultado do envio com contagem de destinatários
- Falha de montagem: tipo do erro que abortou compose()

Uso:
    from app.observability.metrics import record_latency, record_delivery

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("smtp_transport", "deliver", latency_ms, correlation_id)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "send_email", "smtp_transport")
        operation: Nome da operação (ex: "execute", "deliver")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery(
    outcome: str,
    recipient_count: int,
    refused_count: int = 0,
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de uma entrega.

    Args:
        outcome: "sent", "partial" ou "failed"
        recipient_count: Total de destinatários de envelope
        refused_count: Destinatários recusados pelo servidor
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "component": "delivery",
            "outcome": outcome,
            "recipient_count": recipient_count,
            "refused_count": refused_count,
            "correlation_id": correlation_id,
        },
    )


def record_compose_failure(
    error_type: str,
    correlation_id: str | None = None,
) -> None:
    """Registra compose() abortado por erro de validação."""
    logger.info(
        "metric_compose_failure",
        extra={
            "metric_type": "compose_failure",
            "component": "message_assembler",
            "error_type": error_type,
            "correlation_id": correlation_id,
        },
    )
