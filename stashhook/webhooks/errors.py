"""Error taxonomy for Bitbucket Server webhook ingestion.

Every failure raised while validating or decoding a delivery derives from
:class:`WebhookError`. The three families map to distinct caller responses:

- :class:`SignatureVerificationError` rejects the delivery as unauthorized.
- :class:`PayloadExtractionError` rejects the delivery as a client error.
- :class:`EventDecodeError` covers unknown event keys, which callers should
  acknowledge and skip, and malformed payloads, which are bad requests.

Messages name algorithms, content types, and decode diagnostics only. They
never include secrets, digests, or raw signature header values.
"""

from __future__ import annotations


class WebhookError(Exception):
    """Base exception for all webhook ingestion failures."""


class SignatureVerificationError(WebhookError):
    """Raised when a delivery's signature cannot be verified."""


class MissingSignatureError(SignatureVerificationError):
    """Raised when the signature header is absent or empty."""

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("missing webhook signature")


class MalformedSignatureError(SignatureVerificationError):
    """Raised when the signature header cannot be parsed.

    Attributes
    ----------
    reason
        Short description of the structural problem.

    """

    def __init__(self, reason: str) -> None:
        """Initialise with the structural problem description."""
        self.reason = reason
        super().__init__(f"malformed webhook signature: {reason}")

    @classmethod
    def missing_separator(cls) -> MalformedSignatureError:
        """Return an error for headers without an ``=`` separator."""
        return cls("expected '<algorithm>=<hex digest>'")

    @classmethod
    def invalid_hex(cls) -> MalformedSignatureError:
        """Return an error for digests that are not valid hexadecimal."""
        return cls("digest is not valid hexadecimal")

    @classmethod
    def wrong_length(cls, algorithm: str, expected: int) -> MalformedSignatureError:
        """Return an error for digests of the wrong size for *algorithm*."""
        return cls(f"{algorithm} digest must be {expected} bytes")


class UnknownAlgorithmError(SignatureVerificationError):
    """Raised when the signature names an unsupported hash algorithm.

    Attributes
    ----------
    algorithm
        The algorithm prefix found in the signature header.

    """

    def __init__(self, algorithm: str) -> None:
        """Initialise with the unrecognised algorithm prefix."""
        self.algorithm = algorithm
        super().__init__(f"unknown signature algorithm: {algorithm!r}")


class SignatureMismatchError(SignatureVerificationError):
    """Raised when the computed HMAC does not match the delivered one.

    Attributes
    ----------
    algorithm
        Name of the hash algorithm used for the comparison.

    """

    def __init__(self, algorithm: str) -> None:
        """Initialise with the algorithm that produced the mismatch."""
        self.algorithm = algorithm
        super().__init__(f"payload signature check failed ({algorithm})")


class PayloadExtractionError(WebhookError):
    """Raised when the payload cannot be located in the request body."""


class UnsupportedContentTypeError(PayloadExtractionError):
    """Raised for content types other than JSON or form-url-encoded.

    Attributes
    ----------
    content_type
        The offending ``Content-Type`` header value.

    """

    def __init__(self, content_type: str) -> None:
        """Initialise with the rejected content type."""
        self.content_type = content_type
        super().__init__(
            f"webhook request has unsupported Content-Type {content_type!r}"
        )


class EventDecodeError(WebhookError):
    """Raised when a validated payload cannot become an event record."""


class UnknownEventKeyError(EventDecodeError):
    """Raised when the event key is not one of the recognised keys.

    This is recoverable: Bitbucket Server adds event keys over time, so
    callers should acknowledge the delivery and skip it.

    Attributes
    ----------
    event_key
        The unrecognised event key.

    """

    def __init__(self, event_key: str) -> None:
        """Initialise with the unrecognised event key."""
        self.event_key = event_key
        super().__init__(f"unknown X-Event-Key in message: {event_key!r}")


class MalformedPayloadError(EventDecodeError):
    """Raised when a payload is structurally invalid for its event shape.

    Attributes
    ----------
    detail
        Diagnostic from the underlying decoder.
    event_key
        Event key being decoded, when known.

    """

    def __init__(self, detail: str, *, event_key: str | None = None) -> None:
        """Initialise with the decoder diagnostic and optional event key."""
        self.detail = detail
        self.event_key = event_key
        prefix = f"{event_key} payload" if event_key else "webhook payload"
        super().__init__(f"malformed {prefix}: {detail}")

    @classmethod
    def undecodable_form(cls) -> MalformedPayloadError:
        """Return an error for form bodies that are not valid UTF-8."""
        return cls("form-encoded body is not valid UTF-8")


class WebhookConfigError(RuntimeError):
    """Raised when webhook configuration is invalid."""

    @classmethod
    def missing_secret(cls) -> WebhookConfigError:
        """Return an error when no secret is configured and unsigned is off."""
        return cls(
            "STASHHOOK_WEBHOOK_SECRET is required; set "
            "STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS=1 to accept unsigned deliveries"
        )


__all__ = [
    "EventDecodeError",
    "MalformedPayloadError",
    "MalformedSignatureError",
    "MissingSignatureError",
    "PayloadExtractionError",
    "SignatureMismatchError",
    "SignatureVerificationError",
    "UnknownAlgorithmError",
    "UnknownEventKeyError",
    "UnsupportedContentTypeError",
    "WebhookConfigError",
    "WebhookError",
]
