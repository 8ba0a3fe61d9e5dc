"""Testes para negociação de content-type e normalização de assunto."""

from __future__ import annotations

import pytest

from api.payload_builders.email import (
    is_plain_text,
    negotiate_content_type,
    normalize_subject,
)


class TestNegotiateContentType:
    """Derivação de content-type/charset efetivos."""

    def test_text_type_receives_known_charset(self) -> None:
        assert negotiate_content_type("text/html", "UTF-8") == (
            "text/html; charset=UTF-8",
            "UTF-8",
        )

    def test_is_idempotent(self) -> None:
        first = negotiate_content_type("text/plain", "ISO-8859-1")
        second = negotiate_content_type(first[0], first[1])
        assert second == first
        assert second[0].count("charset=") == 1

    def test_explicit_charset_parameter_wins(self) -> None:
        content_type, charset = negotiate_content_type(
            "text/plain; charset=ISO-8859-1",
            "UTF-8",
        )
        assert content_type == "text/plain; charset=ISO-8859-1"
        assert charset == "ISO-8859-1"

    def test_charset_marker_is_case_insensitive(self) -> None:
        _, charset = negotiate_content_type("text/plain; CHARSET=utf-8", None)
        assert charset == "utf-8"

    def test_charset_value_stops_at_next_space(self) -> None:
        _, charset = negotiate_content_type("text/plain; charset=utf-8 format", None)
        assert charset == "utf-8"

    def test_non_text_type_is_unchanged(self) -> None:
        assert negotiate_content_type("application/pdf", "UTF-8") == (
            "application/pdf",
            "UTF-8",
        )

    def test_text_type_without_charset_is_unchanged(self) -> None:
        assert negotiate_content_type("text/html", None) == ("text/html", None)

    def test_text_prefix_is_case_sensitive(self) -> None:
        """Só o prefixo "text/" minúsculo recebe o charset."""
        assert negotiate_content_type("TEXT/html", "UTF-8") == ("TEXT/html", "UTF-8")
        assert negotiate_content_type("Text/plain", "UTF-8") == ("Text/plain", "UTF-8")

    @pytest.mark.parametrize("content_type", [None, ""])
    def test_empty_type_clears_type_and_keeps_charset(
        self,
        content_type: str | None,
    ) -> None:
        assert negotiate_content_type(content_type, "UTF-8") == (None, "UTF-8")


class TestNormalizeSubject:
    """Assunto sem quebras de linha."""

    def test_each_line_break_becomes_space(self) -> None:
        assert normalize_subject("a\r\nb\nc\rd") == "a  b c d"

    def test_none_and_plain_subject(self) -> None:
        assert normalize_subject(None) is None
        assert normalize_subject("Olá") == "Olá"


class TestIsPlainText:
    """Detecção do tipo text/plain exato."""

    @pytest.mark.parametrize("content_type", ["text/plain", "TEXT/PLAIN"])
    def test_exact_plain_text(self, content_type: str) -> None:
        assert is_plain_text(content_type) is True

    @pytest.mark.parametrize(
        "content_type",
        [None, "", "text/html", "text/plain; charset=UTF-8"],
    )
    def test_other_types(self, content_type: str | None) -> None:
        assert is_plain_text(content_type) is False
