"""Testes para SendEmailUseCase."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from api.connectors.email import SEND_FAILURE_MSG
from app.services import MessageAssembler
from app.sessions import SessionConfig
from app.use_cases.email import SendEmailUseCase
from config.settings import EnvironmentDefaults
from utils.errors import MissingHostError, NoRecipientsError, TransportFailureError


class RecordingTransport:
    """Transporte falso que guarda a última entrega."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.deliveries: list[tuple[object, object]] = []

    def deliver(self, message, session) -> str:
        self.deliveries.append((message, session))
        if self.error is not None:
            raise self.error
        return "<id-1@example.com>"


def _assembler(host: str = "smtp.example.com") -> MessageAssembler:
    config = SessionConfig(EnvironmentDefaults(host=host, smtp_port=2525))
    assembler = MessageAssembler(config, clock=lambda: datetime(2026, 1, 1, tzinfo=UTC))
    return assembler.set_from("a@b.com").add_to("c@d.com").set_content("Oi", "text/plain")


class TestSendEmailUseCase:
    """Orquestração de envio."""

    def test_composes_and_delivers(self) -> None:
        transport = RecordingTransport()
        assembler = _assembler()

        result = SendEmailUseCase(transport).execute(assembler)

        assert result.message_id == "<id-1@example.com>"
        assert result.recipient_count == 1
        assert result.correlation_id
        message, session = transport.deliveries[0]
        assert message is assembler.composed
        assert session.host == "smtp.example.com"
        assert assembler.session_config.is_frozen is True

    def test_reuses_already_composed_message(self) -> None:
        transport = RecordingTransport()
        assembler = _assembler()
        composed = assembler.compose()

        SendEmailUseCase(transport).execute(assembler)

        assert transport.deliveries[0][0] is composed

    def test_unexpected_transport_error_is_wrapped(self) -> None:
        transport = RecordingTransport(error=ValueError("quebrou"))

        with pytest.raises(TransportFailureError) as exc_info:
            SendEmailUseCase(transport).execute(_assembler())

        assert str(exc_info.value) == f"{SEND_FAILURE_MSG} : smtp.example.com:2525"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_transport_failure_propagates_unchanged(self) -> None:
        error = TransportFailureError(SEND_FAILURE_MSG, host="smtp.example.com", port=2525)

        with pytest.raises(TransportFailureError) as exc_info:
            SendEmailUseCase(RecordingTransport(error=error)).execute(_assembler())

        assert exc_info.value is error

    def test_validation_errors_are_not_wrapped(self) -> None:
        assembler = MessageAssembler(SessionConfig(EnvironmentDefaults(host="smtp.example.com")))
        assembler.set_from("a@b.com")

        with pytest.raises(NoRecipientsError):
            SendEmailUseCase(RecordingTransport()).execute(assembler)

    def test_missing_host_is_surfaced(self) -> None:
        transport = RecordingTransport()
        with pytest.raises(MissingHostError):
            SendEmailUseCase(transport).execute(_assembler(host=""))
        assert transport.deliveries == []
