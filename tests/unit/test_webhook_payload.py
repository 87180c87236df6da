"""Unit tests for webhook payload extraction.

Run with:
    pytest tests/unit/test_webhook_payload.py
"""

from __future__ import annotations

import pytest

from stashhook.webhooks.errors import (
    MalformedPayloadError,
    UnsupportedContentTypeError,
)
from stashhook.webhooks.payload import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    extract_payload,
    media_type,
)
from tests.helpers.webhook_payloads import form_body


class TestJsonBodies:
    """Tests for application/json bodies."""

    def test_returns_body_unchanged(self) -> None:
        """The JSON body is the payload, byte for byte."""
        body = b'{"eventKey": "pr:opened"}\n'
        assert extract_payload(JSON_CONTENT_TYPE, body) is body

    def test_ignores_charset_parameter(self) -> None:
        """Media type parameters do not affect negotiation."""
        body = b"{}"
        assert extract_payload("application/json; charset=UTF-8", body) == body

    def test_media_type_is_case_insensitive(self) -> None:
        """Media types compare case-insensitively."""
        assert extract_payload("Application/JSON", b"{}") == b"{}"


class TestFormBodies:
    """Tests for application/x-www-form-urlencoded bodies."""

    def test_extracts_percent_encoded_payload(self) -> None:
        """payload=%7B%22a%22%3A1%7D extracts to {"a":1}."""
        extracted = extract_payload(FORM_CONTENT_TYPE, b"payload=%7B%22a%22%3A1%7D")
        assert extracted == b'{"a":1}'

    @pytest.mark.parametrize(
        "payload",
        [
            b'{"a":1}',
            b'{"title":"caf\xc3\xa9 & cr\xc3\xa8me","n":"a+b=c"}',
            b"",
            b'{"text":"100% \\"quoted\\""}',
        ],
    )
    def test_left_inverse_of_form_encoding(self, payload: bytes) -> None:
        """Extracting a form-encoded payload returns the original bytes."""
        assert extract_payload(FORM_CONTENT_TYPE, form_body(payload)) == payload

    def test_missing_field_yields_empty_payload(self) -> None:
        """A form body without 'payload' extracts to an empty payload."""
        assert extract_payload(FORM_CONTENT_TYPE, b"other=1") == b""

    def test_first_value_wins(self) -> None:
        """Repeated fields use the first value."""
        body = b"payload=%7B%7D&payload=%5B%5D"
        assert extract_payload(FORM_CONTENT_TYPE, body) == b"{}"

    def test_plus_decodes_to_space(self) -> None:
        """Form encoding represents spaces as '+'."""
        assert extract_payload(FORM_CONTENT_TYPE, b"payload=a+b") == b"a b"

    @pytest.mark.parametrize("body", [b"payload=\xff", b"payload=%ff"])
    def test_invalid_utf8_is_malformed(self, body: bytes) -> None:
        """Bodies that do not decode as UTF-8 raise MalformedPayloadError."""
        with pytest.raises(MalformedPayloadError):
            extract_payload(FORM_CONTENT_TYPE, body)


class TestUnsupportedContentTypes:
    """Tests for rejected content types."""

    @pytest.mark.parametrize(
        "content_type", ["text/plain", "multipart/form-data", "application/xml"]
    )
    def test_rejects_other_types(self, content_type: str) -> None:
        """Other content types raise UnsupportedContentTypeError naming them."""
        with pytest.raises(UnsupportedContentTypeError) as excinfo:
            extract_payload(content_type, b"{}")
        assert excinfo.value.content_type == content_type
        assert content_type in str(excinfo.value)

    @pytest.mark.parametrize("content_type", [None, ""])
    def test_rejects_missing_type(self, content_type: str | None) -> None:
        """A missing content type is unsupported."""
        with pytest.raises(UnsupportedContentTypeError):
            extract_payload(content_type, b"{}")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("application/json", "application/json"),
        (" APPLICATION/JSON ; charset=utf-8", "application/json"),
        (None, ""),
    ],
)
def test_media_type(raw: str | None, expected: str) -> None:
    """media_type strips parameters and normalises case."""
    assert media_type(raw) == expected
