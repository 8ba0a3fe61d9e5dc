"""Testes para app.observability (correlation_id e métricas)."""

from __future__ import annotations

import logging

import pytest

from app.observability import (
    correlation_scope,
    get_correlation_id,
    record_compose_failure,
    record_delivery,
)


class TestCorrelationScope:
    """Escopo de correlation_id."""

    def test_generates_and_resets(self) -> None:
        assert get_correlation_id() == ""
        with correlation_scope() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id
        assert get_correlation_id() == ""

    def test_explicit_id(self) -> None:
        with correlation_scope("abc-123") as correlation_id:
            assert correlation_id == "abc-123"

    def test_nested_scope_reuses_current(self) -> None:
        with correlation_scope() as outer, correlation_scope() as inner:
            assert inner == outer
        assert get_correlation_id() == ""


class TestMetrics:
    """Métricas como logs estruturados."""

    def test_delivery_metric(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="app.observability.metrics"):
            record_delivery("partial", 3, refused_count=1, correlation_id="abc")

        record = caplog.records[-1]
        assert record.getMessage() == "metric_delivery"
        assert record.outcome == "partial"
        assert record.refused_count == 1

    def test_compose_failure_metric(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="app.observability.metrics"):
            record_compose_failure("MissingFromError")

        assert caplog.records[-1].error_type == "MissingFromError"
