"""Testes para config.logging.

Cobre: configure_logging, get_logger, log_fallback,
CorrelationIdFilter, RedactAddressFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    RedactAddressFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


def _record(msg: str = "message", args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_configure_logging_default_level(self) -> None:
        """Configura logging com nível padrão INFO."""
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_configure_logging_levels(self, level: str, expected: int) -> None:
        """Aceita níveis válidos sem diferenciar caixa."""
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        """configure_logging substitui handlers existentes."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_configure_logging_installs_correlation_and_redaction_filters(self) -> None:
        """Handler recebe filtro de correlation_id e de redação."""
        configure_logging(correlation_id_getter=lambda: "custom-corr-id")
        handler = logging.getLogger().handlers[0]
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
        assert any(isinstance(f, RedactAddressFilter) for f in handler.filters)

    def test_constants(self) -> None:
        """Constantes de nível e nome do serviço."""
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "remessa"


class TestGetLogger:
    """Testes para get_logger."""

    def test_get_logger_returns_named_logger(self) -> None:
        logger = get_logger("app.services.message_assembler")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "app.services.message_assembler"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        assert get_logger("same.module") is get_logger("same.module")


class TestLogFallback:
    """Testes para log_fallback."""

    def test_log_fallback_basic(self) -> None:
        """Formato lazy: template + componente, extra com fallback_used."""
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "header_folding")
        logger.info.assert_called_once()
        call_args = logger.info.call_args
        assert call_args[0][0] == "Fallback applied for %s"
        assert call_args[0][1] == "header_folding"
        extra = call_args[1]["extra"]
        assert extra["fallback_used"] is True
        assert extra["component"] == "header_folding"

    def test_log_fallback_with_all_params(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "idna_to_ascii", reason="idna_codec_error", elapsed_ms=1.5)
        extra = logger.info.call_args[1]["extra"]
        assert extra["reason"] == "idna_codec_error"
        assert extra["elapsed_ms"] == 1.5

    def test_log_fallback_without_optional_params(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "header_folding")
        extra = logger.info.call_args[1]["extra"]
        assert "reason" not in extra
        assert "elapsed_ms" not in extra


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        filter_ = CorrelationIdFilter("remessa", lambda: "corr-123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "remessa"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        """correlation_id passado via extra tem precedência."""
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        filter_ = CorrelationIdFilter("service_name", None)
        record = _record()
        filter_.filter(record)
        assert record.correlation_id == ""


class TestRedactAddressFilter:
    """Testes para RedactAddressFilter."""

    def test_masks_address_in_formatted_message(self) -> None:
        """Endereço nos args é mascarado na mensagem final."""
        record = _record("falha ao enviar para %s", ("fulano@example.com",))
        assert RedactAddressFilter().filter(record) is True
        assert record.getMessage() == "falha ao enviar para f***@example.com"
        assert record.args is None

    def test_message_without_address_is_untouched(self) -> None:
        record = _record("message_composed")
        RedactAddressFilter().filter(record)
        assert record.msg == "message_composed"
        assert record.args == ()


class TestCreateJsonFormatter:
    """Testes para create_json_formatter e constantes."""

    def test_required_log_fields_content(self) -> None:
        expected = {"asctime", "levelname", "name", "message", "correlation_id", "service"}
        assert set(REQUIRED_LOG_FIELDS) == expected
        assert isinstance(REQUIRED_LOG_FIELDS, tuple)

    def test_field_rename_map_content(self) -> None:
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_formats_record(self) -> None:
        """Saída é JSON com campos renomeados."""
        from pythonjsonlogger.json import JsonFormatter

        formatter = create_json_formatter()
        assert isinstance(formatter, JsonFormatter)
        record = _record("message_composed")
        record.correlation_id = "abc-123"
        record.service = "remessa"
        payload = json.loads(formatter.format(record))
        assert payload["message"] == "message_composed"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "test"
        assert payload["correlation_id"] == "abc-123"
        assert payload["service"] == "remessa"


class TestLoggingIntegration:
    """Integração do sistema de logging."""

    def test_full_logging_flow(self) -> None:
        """Fluxo completo: configure, get_logger, log com extras."""
        configure_logging(
            level="DEBUG",
            service_name="integration_test",
            correlation_id_getter=lambda: "int-test-001",
        )
        logger = get_logger("integration.test")
        logger.debug("debug", extra={"recipient_count": 2})
        logger.info("info")
        logger.warning("aviso para %s", "a@b.com")
