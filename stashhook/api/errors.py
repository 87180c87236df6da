"""Falcon error handlers for webhook failures.

Each webhook error family maps to the response Bitbucket Server should see:

- signature failures: ``401 Unauthorized``;
- unsupported content types: ``415 Unsupported Media Type``;
- malformed payloads: ``400 Bad Request``;
- unknown event keys: ``202 Accepted`` so the server does not redeliver an
  event this receiver will never understand.

Usage
-----
Register the handlers on the Falcon app::

    from stashhook.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from stashhook.webhooks.errors import (
    MalformedPayloadError,
    PayloadExtractionError,
    SignatureVerificationError,
    UnknownEventKeyError,
)

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "handle_malformed_payload",
    "handle_signature_error",
    "handle_unknown_event_key",
    "handle_unsupported_content",
    "register_error_handlers",
]


async def handle_signature_error(
    _req: Request,
    resp: Response,
    _ex: SignatureVerificationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``SignatureVerificationError`` to an HTTP 401 JSON response.

    The description is fixed so nothing about the expected signature is
    revealed to the sender.
    """
    resp.status = falcon.HTTP_401
    resp.media = {
        "title": "Unauthorized",
        "description": "webhook signature verification failed",
    }


async def handle_unsupported_content(
    _req: Request,
    resp: Response,
    ex: PayloadExtractionError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PayloadExtractionError`` to an HTTP 415 JSON response."""
    resp.status = falcon.HTTP_415
    resp.media = {
        "title": "Unsupported media type",
        "description": str(ex),
    }


async def handle_malformed_payload(
    _req: Request,
    resp: Response,
    ex: MalformedPayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``MalformedPayloadError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Malformed payload",
        "description": ex.detail,
    }
    if ex.event_key is not None:
        media["event_key"] = ex.event_key
    resp.media = media


async def handle_unknown_event_key(
    _req: Request,
    resp: Response,
    ex: UnknownEventKeyError,
    _params: dict[str, typ.Any],
) -> None:
    """Acknowledge deliveries with unrecognised event keys with HTTP 202."""
    resp.status = falcon.HTTP_202
    resp.media = {"status": "ignored", "event_key": ex.event_key}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Register all webhook error handlers on *app*."""
    app.add_error_handler(SignatureVerificationError, handle_signature_error)
    app.add_error_handler(PayloadExtractionError, handle_unsupported_content)
    app.add_error_handler(MalformedPayloadError, handle_malformed_payload)
    app.add_error_handler(UnknownEventKeyError, handle_unknown_event_key)
