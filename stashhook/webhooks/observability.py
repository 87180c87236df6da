"""Structured log events for webhook deliveries.

Each delivery outcome is logged once with a :class:`WebhookEventType` tag and
the delivery's request id and event key, so log aggregators can count
deliveries per outcome and event key.
"""

from __future__ import annotations

import enum
import typing as typ

from stashhook.logging import get_logger, log_exception, log_info, log_warning

from .errors import (
    MalformedPayloadError,
    PayloadExtractionError,
    SignatureVerificationError,
    UnknownEventKeyError,
)

if typ.TYPE_CHECKING:
    from stashhook.logging import _SupportsLog

    from .validation import WebhookDelivery

_logger = get_logger(__name__)


class WebhookEventType(enum.StrEnum):
    """Structured log event types for webhook observability."""

    DELIVERY_ACCEPTED = "webhook.delivery.accepted"
    DELIVERY_REJECTED = "webhook.delivery.rejected"
    DELIVERY_IGNORED = "webhook.delivery.ignored"
    DELIVERY_FAILED = "webhook.delivery.failed"
    VERIFICATION_DISABLED = "webhook.verification.disabled"


class ErrorCategory(enum.StrEnum):
    """Categories for webhook failures in logs and alerts."""

    AUTHENTICATION = "authentication"
    UNSUPPORTED_CONTENT = "unsupported_content"
    UNKNOWN_EVENT = "unknown_event"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (SignatureVerificationError, ErrorCategory.AUTHENTICATION),
    (PayloadExtractionError, ErrorCategory.UNSUPPORTED_CONTENT),
    (UnknownEventKeyError, ErrorCategory.UNKNOWN_EVENT),
    (MalformedPayloadError, ErrorCategory.MALFORMED_PAYLOAD),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a webhook failure for log routing.

    Returns:
        ErrorCategory matching the exception family, or ``UNKNOWN``.

    """
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class WebhookEventLogger:
    """Emit structured webhook delivery events via femtologging.

    Accepted deliveries log at INFO and handler failures at ERROR. Rejected
    and ignored deliveries and disabled verification log at WARNING.
    """

    def __init__(self, logger: _SupportsLog | None = None) -> None:
        """Use *logger*, or the module logger when omitted."""
        self._logger = logger if logger is not None else _logger

    def log_verification_disabled(self) -> None:
        """Log that signatures will not be checked."""
        log_warning(
            self._logger,
            "[%s] no webhook secret configured; unsigned deliveries will be "
            "accepted. Do not run this configuration in production.",
            WebhookEventType.VERIFICATION_DISABLED,
        )

    def log_delivery_accepted(self, delivery: WebhookDelivery) -> None:
        """Log a delivery that validated and decoded."""
        log_info(
            self._logger,
            "[%s] request_id=%s event_key=%s event_type=%s",
            WebhookEventType.DELIVERY_ACCEPTED,
            delivery.request_id,
            delivery.event_key,
            type(delivery.event).__name__,
        )

    def log_delivery_failed(
        self, delivery: WebhookDelivery, exc: BaseException
    ) -> None:
        """Log a validated delivery whose handler raised."""
        log_exception(
            self._logger,
            f"[{WebhookEventType.DELIVERY_FAILED}] "
            f"request_id={delivery.request_id} event_key={delivery.event_key}",
            exc,
        )

    def log_delivery_ignored(self, request_id: str, event_key: str) -> None:
        """Log a delivery skipped because its event key is not recognised."""
        log_warning(
            self._logger,
            "[%s] request_id=%s event_key=%s",
            WebhookEventType.DELIVERY_IGNORED,
            request_id,
            event_key,
        )

    def log_delivery_rejected(
        self, request_id: str, event_key: str, exc: BaseException
    ) -> None:
        """Log a delivery that failed validation or decoding."""
        log_warning(
            self._logger,
            "[%s] request_id=%s event_key=%s error_category=%s error=%s",
            WebhookEventType.DELIVERY_REJECTED,
            request_id,
            event_key,
            categorize_error(exc),
            exc,
        )


__all__ = [
    "ErrorCategory",
    "WebhookEventLogger",
    "WebhookEventType",
    "categorize_error",
]
