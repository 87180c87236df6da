"""Unit tests for the webhook error taxonomy.

Run with:
    pytest tests/unit/test_webhook_errors.py
"""

from __future__ import annotations

import pytest

from stashhook.webhooks.errors import (
    EventDecodeError,
    MalformedPayloadError,
    MalformedSignatureError,
    MissingSignatureError,
    PayloadExtractionError,
    SignatureMismatchError,
    SignatureVerificationError,
    UnknownAlgorithmError,
    UnknownEventKeyError,
    UnsupportedContentTypeError,
    WebhookError,
)


@pytest.mark.parametrize(
    ("exc", "family"),
    [
        (MissingSignatureError(), SignatureVerificationError),
        (MalformedSignatureError.missing_separator(), SignatureVerificationError),
        (UnknownAlgorithmError("md5"), SignatureVerificationError),
        (SignatureMismatchError("sha1"), SignatureVerificationError),
        (UnsupportedContentTypeError("text/plain"), PayloadExtractionError),
        (UnknownEventKeyError("pr:bogus"), EventDecodeError),
        (MalformedPayloadError("bad"), EventDecodeError),
    ],
)
def test_families(exc: WebhookError, family: type[WebhookError]) -> None:
    """Each error belongs to its family and to WebhookError."""
    assert isinstance(exc, family)
    assert isinstance(exc, WebhookError)


def test_unknown_algorithm_message() -> None:
    """The message names the rejected algorithm."""
    assert "md5" in str(UnknownAlgorithmError("md5"))


def test_wrong_length_message() -> None:
    """Length errors name the algorithm and expected size."""
    message = str(MalformedSignatureError.wrong_length("sha256", 32))
    assert "sha256" in message
    assert "32" in message


def test_malformed_payload_message_includes_key() -> None:
    """Malformed payload errors mention the event key when known."""
    exc = MalformedPayloadError("Input data was truncated", event_key="pr:opened")
    assert str(exc) == "malformed pr:opened payload: Input data was truncated"
    assert exc.detail == "Input data was truncated"


def test_unknown_event_key_message() -> None:
    """UnknownEventKeyError keeps the key and names it in the message."""
    exc = UnknownEventKeyError("pr:bogus")
    assert exc.event_key == "pr:bogus"
    assert "pr:bogus" in str(exc)
