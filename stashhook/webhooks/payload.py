"""Locate the JSON payload inside a webhook request body.

Bitbucket Server posts the event JSON either directly as the body
(``application/json``) or as the ``payload`` field of a form-encoded body
(``application/x-www-form-urlencoded``).
"""

from __future__ import annotations

import typing as typ
from urllib.parse import parse_qs

from .errors import MalformedPayloadError, UnsupportedContentTypeError

JSON_CONTENT_TYPE: typ.Final = "application/json"
FORM_CONTENT_TYPE: typ.Final = "application/x-www-form-urlencoded"
PAYLOAD_FORM_FIELD: typ.Final = "payload"


def media_type(content_type: str | None) -> str:
    """Return the lower-cased media type without parameters.

    Examples
    --------
    >>> media_type("application/json; charset=UTF-8")
    'application/json'

    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def _form_payload(body: bytes) -> bytes:
    """Return the ``payload`` form field of *body*, or ``b""`` when absent."""
    try:
        text = body.decode("utf-8")
        form = parse_qs(text, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError:
        raise MalformedPayloadError.undecodable_form() from None

    values = form.get(PAYLOAD_FORM_FIELD)
    if not values:
        return b""
    return values[0].encode("utf-8")


def extract_payload(content_type: str | None, body: bytes) -> bytes:
    """Return the canonical JSON payload bytes for a request body.

    Parameters
    ----------
    content_type : str | None
        The request's ``Content-Type`` header value.
    body : bytes
        The complete request body.

    Returns
    -------
    bytes
        The body itself for JSON requests, or the decoded ``payload`` field
        for form-encoded requests. A form body without that field yields an
        empty payload, which later fails to decode.

    Raises
    ------
    UnsupportedContentTypeError
        If the content type is neither JSON nor form-url-encoded.
    MalformedPayloadError
        If a form-encoded body is not valid UTF-8.

    """
    kind = media_type(content_type)
    if kind == JSON_CONTENT_TYPE:
        return body
    if kind == FORM_CONTENT_TYPE:
        return _form_payload(body)
    raise UnsupportedContentTypeError(content_type or "")


__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "PAYLOAD_FORM_FIELD",
    "extract_payload",
    "media_type",
]
