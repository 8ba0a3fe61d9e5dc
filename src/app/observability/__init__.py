"""Observabilidade: logs estruturados, correlation_id e métricas.

Uso:
    from app.observability import correlation_scope, record_latency
"""

from app.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_compose_failure,
    record_delivery,
    record_latency,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_compose_failure",
    "record_delivery",
    "record_latency",
    "reset_correlation_id",
    "set_correlation_id",
]
