"""Unit tests for webhook delivery observability.

Run with:
    pytest tests/unit/test_webhook_observability.py
"""

from __future__ import annotations

import pytest

from stashhook.webhooks.errors import (
    MalformedPayloadError,
    MalformedSignatureError,
    MissingSignatureError,
    SignatureMismatchError,
    UnknownAlgorithmError,
    UnknownEventKeyError,
    UnsupportedContentTypeError,
)
from stashhook.webhooks.events import PushEvent
from stashhook.webhooks.observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookEventType,
    categorize_error,
)
from stashhook.webhooks.validation import WebhookDelivery


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message))
        return message


@pytest.mark.parametrize(
    ("exc", "category"),
    [
        (MissingSignatureError(), ErrorCategory.AUTHENTICATION),
        (MalformedSignatureError.invalid_hex(), ErrorCategory.AUTHENTICATION),
        (UnknownAlgorithmError("md5"), ErrorCategory.AUTHENTICATION),
        (SignatureMismatchError("sha1"), ErrorCategory.AUTHENTICATION),
        (UnsupportedContentTypeError("text/plain"), ErrorCategory.UNSUPPORTED_CONTENT),
        (UnknownEventKeyError("pr:bogus"), ErrorCategory.UNKNOWN_EVENT),
        (MalformedPayloadError("truncated"), ErrorCategory.MALFORMED_PAYLOAD),
        (RuntimeError("boom"), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize_error(exc: BaseException, category: ErrorCategory) -> None:
    """Each error family maps to its category."""
    assert categorize_error(exc) is category


class TestWebhookEventLogger:
    """Tests for WebhookEventLogger."""

    def test_accepted_logs_info(self) -> None:
        """Accepted deliveries log at INFO with the event type name."""
        logger = _FakeLogger()
        delivery = WebhookDelivery(
            request_id="req-1", event_key="repo:refs_changed", event=PushEvent()
        )

        WebhookEventLogger(logger).log_delivery_accepted(delivery)

        assert logger.calls == [
            (
                "INFO",
                "[webhook.delivery.accepted] request_id=req-1 "
                "event_key=repo:refs_changed event_type=PushEvent",
            )
        ]

    def test_failed_logs_error_with_exception(self) -> None:
        """Handler failures log at ERROR with the exception attached."""
        captured: list[tuple[str, str, object | None]] = []

        class _ExcLogger(_FakeLogger):
            def log(
                self,
                level: str,
                message: str,
                /,
                *,
                exc_info: object | None = None,
                stack_info: bool = False,
            ) -> str:
                captured.append((level, message, exc_info))
                return message

        delivery = WebhookDelivery(
            request_id="req-4", event_key="repo:refs_changed", event=PushEvent()
        )
        exc = RuntimeError("handler exploded")

        WebhookEventLogger(_ExcLogger()).log_delivery_failed(delivery, exc)

        assert captured == [
            (
                "ERROR",
                "[webhook.delivery.failed] request_id=req-4 "
                "event_key=repo:refs_changed",
                exc,
            )
        ]

    def test_ignored_logs_warning(self) -> None:
        """Ignored deliveries log at WARNING."""
        logger = _FakeLogger()
        WebhookEventLogger(logger).log_delivery_ignored("req-2", "pr:bogus")
        assert logger.calls == [
            (
                "WARNING",
                "[webhook.delivery.ignored] request_id=req-2 event_key=pr:bogus",
            )
        ]

    def test_rejected_includes_category(self) -> None:
        """Rejected deliveries log the error category."""
        logger = _FakeLogger()
        WebhookEventLogger(logger).log_delivery_rejected(
            "req-3", "pr:opened", SignatureMismatchError("sha256")
        )
        level, message = logger.calls[0]
        assert level == "WARNING"
        assert message.startswith(f"[{WebhookEventType.DELIVERY_REJECTED}]")
        assert "error_category=authentication" in message

    def test_verification_disabled_warns(self) -> None:
        """Disabled verification is logged loudly."""
        logger = _FakeLogger()
        WebhookEventLogger(logger).log_verification_disabled()
        level, message = logger.calls[0]
        assert level == "WARNING"
        assert "production" in message
