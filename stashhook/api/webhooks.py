"""Falcon resource receiving Bitbucket Server webhook deliveries.

``POST /webhooks`` reads the request body once, validates and decodes it,
and hands the resulting :class:`~stashhook.webhooks.WebhookDelivery` to the
configured handler. Failures propagate as webhook errors and are turned into
responses by :mod:`stashhook.api.errors`. Handler exceptions are logged and
left to Falcon's default 500 response.

Usage
-----
Register the resource on the Falcon app::

    app.add_route(
        "/webhooks",
        WebhookResource(validator=WebhookValidator(secret), handler=handler),
    )

"""

from __future__ import annotations

import typing as typ

import falcon

from stashhook.webhooks.errors import UnknownEventKeyError, WebhookError
from stashhook.webhooks.observability import WebhookEventLogger
from stashhook.webhooks.validation import (
    WebhookRequest,
    event_key_of,
    request_id_of,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from stashhook.webhooks.validation import WebhookDelivery, WebhookValidator

__all__ = ["WebhookHandler", "WebhookResource"]


class WebhookHandler(typ.Protocol):
    """Async callable that processes a validated delivery."""

    async def __call__(self, delivery: WebhookDelivery) -> None:
        """Process *delivery*."""
        ...


class WebhookResource:
    """Resource accepting webhook deliveries on ``POST``.

    Parameters
    ----------
    validator
        Validator holding the shared secret.
    handler
        Optional async callable invoked with each accepted delivery.
    event_logger
        Structured logger for delivery outcomes.

    """

    def __init__(
        self,
        validator: WebhookValidator,
        *,
        handler: WebhookHandler | None = None,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Configure the resource with its collaborators."""
        self._validator = validator
        self._handler = handler
        self._event_logger = event_logger or WebhookEventLogger()

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle a webhook delivery.

        Parameters
        ----------
        req
            Falcon request carrying the delivery.
        resp
            Falcon response populated with the acceptance status.

        """
        body = await req.stream.read()
        request = WebhookRequest(headers=req.headers, body=body)
        request_id = request_id_of(request)
        event_key = event_key_of(request)

        try:
            delivery = self._validator.parse(request)
        except UnknownEventKeyError:
            self._event_logger.log_delivery_ignored(request_id, event_key)
            raise
        except WebhookError as exc:
            self._event_logger.log_delivery_rejected(request_id, event_key, exc)
            raise

        self._event_logger.log_delivery_accepted(delivery)
        if self._handler is not None:
            try:
                await self._handler(delivery)
            except Exception as exc:
                self._event_logger.log_delivery_failed(delivery, exc)
                raise

        resp.status = falcon.HTTP_200
        resp.media = {
            "status": "accepted",
            "request_id": delivery.request_id,
            "event_key": delivery.event_key,
        }
