"""Validate inbound Bitbucket Server webhook requests.

:class:`WebhookValidator` composes payload extraction, signature
verification, and event decoding for one request at a time. It holds only
the immutable secret, so a single instance can serve concurrent requests.

Usage
-----
Validate a request and decode its event::

    validator = WebhookValidator(b"topsecret")
    request = WebhookRequest(headers=req.headers, body=body)
    delivery = validator.parse(request)
    match delivery.event:
        case PushEvent():
            ...

Passing an empty secret disables signature verification. That mode exists
for local development only; it is logged as a warning whenever a validator
is built without a secret.
"""

from __future__ import annotations

import dataclasses
import types
import typing as typ

from .events import decode_event
from .observability import WebhookEventLogger
from .payload import extract_payload
from .signature import SIGNATURE_HEADER, verify_signature

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .events import WebhookEvent

EVENT_KEY_HEADER = "X-Event-Key"
REQUEST_ID_HEADER = "X-Request-Id"
CONTENT_TYPE_HEADER = "Content-Type"


@dataclasses.dataclass(frozen=True, slots=True)
class WebhookRequest:
    """Headers and fully-read body of an inbound webhook request.

    Header names are matched case-insensitively.
    """

    headers: cabc.Mapping[str, str]
    body: bytes = b""

    def __post_init__(self) -> None:
        """Store headers under lower-cased names in a read-only mapping."""
        normalized = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", types.MappingProxyType(normalized))

    def header(self, name: str) -> str | None:
        """Return the value of header *name*, or ``None`` when absent."""
        return self.headers.get(name.lower())

    @property
    def content_type(self) -> str | None:
        """Return the ``Content-Type`` header."""
        return self.header(CONTENT_TYPE_HEADER)

    @property
    def signature(self) -> str | None:
        """Return the ``X-Hub-Signature`` header."""
        return self.header(SIGNATURE_HEADER)


def event_key_of(request: WebhookRequest) -> str:
    """Return the ``X-Event-Key`` header, or ``""`` when absent."""
    return request.header(EVENT_KEY_HEADER) or ""


def request_id_of(request: WebhookRequest) -> str:
    """Return the ``X-Request-Id`` header, or ``""`` when absent.

    Bitbucket Server sends a unique id per delivery; receivers can use it to
    discard redelivered events.
    """
    return request.header(REQUEST_ID_HEADER) or ""


@dataclasses.dataclass(frozen=True, slots=True)
class WebhookDelivery:
    """A validated delivery and its decoded event."""

    request_id: str
    event_key: str
    event: WebhookEvent


class WebhookValidator:
    """Validate webhook requests against a shared secret.

    Parameters
    ----------
    secret
        Webhook secret configured in Bitbucket Server. A ``str`` is encoded
        as UTF-8. An empty secret disables signature verification.
    event_logger
        Structured logger used to report that verification is disabled.

    """

    __slots__ = ("_secret",)

    def __init__(
        self,
        secret: bytes | str = b"",
        *,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Store the secret and warn when verification is disabled."""
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        self._secret = bytes(secret)
        if not self._secret:
            (event_logger or WebhookEventLogger()).log_verification_disabled()

    @property
    def verifies_signatures(self) -> bool:
        """Return whether deliveries must carry a valid signature."""
        return bool(self._secret)

    def validate(self, request: WebhookRequest) -> bytes:
        """Return the request's JSON payload after verifying its signature.

        The HMAC covers the extracted payload, not the raw request body. For
        JSON requests the two are identical. For form-encoded requests the
        sender must sign the decoded ``payload`` field; a signature computed
        over the whole form body will not match.

        Parameters
        ----------
        request : WebhookRequest
            The inbound request.

        Returns
        -------
        bytes
            The extracted payload.

        Raises
        ------
        PayloadExtractionError
            If the content type is unsupported.
        MalformedPayloadError
            If a form-encoded body cannot be decoded.
        SignatureVerificationError
            If a secret is configured and the signature is missing,
            malformed, uses an unknown algorithm, or does not match.

        """
        payload = extract_payload(request.content_type, request.body)
        if self._secret:
            verify_signature(request.signature, payload, self._secret)
        return payload

    def parse(self, request: WebhookRequest) -> WebhookDelivery:
        """Validate *request* and decode its event.

        Raises
        ------
        WebhookError
            Any validation or decode failure; see :meth:`validate` and
            :func:`~stashhook.webhooks.events.decode_event`.

        """
        payload = self.validate(request)
        event_key = event_key_of(request)
        return WebhookDelivery(
            request_id=request_id_of(request),
            event_key=event_key,
            event=decode_event(event_key, payload),
        )


__all__ = [
    "CONTENT_TYPE_HEADER",
    "EVENT_KEY_HEADER",
    "REQUEST_ID_HEADER",
    "WebhookDelivery",
    "WebhookRequest",
    "WebhookValidator",
    "event_key_of",
    "request_id_of",
]
