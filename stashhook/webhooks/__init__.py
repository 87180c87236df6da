"""Bitbucket Server webhook validation and event decoding."""

from __future__ import annotations

from .config import WebhookConfig
from .errors import (
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
    WebhookConfigError,
    WebhookError,
)
from .events import (
    EVENT_TYPES,
    EventKey,
    PullRequestApprovedEvent,
    PullRequestBranchUpdatedEvent,
    PullRequestDeclinedEvent,
    PullRequestDeletedEvent,
    PullRequestMergedEvent,
    PullRequestModifiedEvent,
    PullRequestNeedsWorkEvent,
    PullRequestOpenedEvent,
    PullRequestReviewersUpdatedEvent,
    PullRequestUnapprovedEvent,
    PushEvent,
    RepositoryForkedEvent,
    RepositoryModifiedEvent,
    WebhookEvent,
    decode_event,
    event_type_for,
)
from .observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookEventType,
    categorize_error,
)
from .payload import extract_payload
from .signature import (
    Signature,
    SignatureAlgorithm,
    compute_signature,
    verify_signature,
)
from .validation import (
    WebhookDelivery,
    WebhookRequest,
    WebhookValidator,
    event_key_of,
    request_id_of,
)

__all__ = [
    "EVENT_TYPES",
    "ErrorCategory",
    "EventDecodeError",
    "EventKey",
    "MalformedPayloadError",
    "MalformedSignatureError",
    "MissingSignatureError",
    "PayloadExtractionError",
    "PullRequestApprovedEvent",
    "PullRequestBranchUpdatedEvent",
    "PullRequestDeclinedEvent",
    "PullRequestDeletedEvent",
    "PullRequestMergedEvent",
    "PullRequestModifiedEvent",
    "PullRequestNeedsWorkEvent",
    "PullRequestOpenedEvent",
    "PullRequestReviewersUpdatedEvent",
    "PullRequestUnapprovedEvent",
    "PushEvent",
    "RepositoryForkedEvent",
    "RepositoryModifiedEvent",
    "Signature",
    "SignatureAlgorithm",
    "SignatureMismatchError",
    "SignatureVerificationError",
    "UnknownAlgorithmError",
    "UnknownEventKeyError",
    "UnsupportedContentTypeError",
    "WebhookConfig",
    "WebhookConfigError",
    "WebhookDelivery",
    "WebhookError",
    "WebhookEvent",
    "WebhookEventLogger",
    "WebhookEventType",
    "WebhookRequest",
    "WebhookValidator",
    "categorize_error",
    "compute_signature",
    "decode_event",
    "event_key_of",
    "event_type_for",
    "extract_payload",
    "request_id_of",
    "verify_signature",
]
