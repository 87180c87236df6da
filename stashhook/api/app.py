"""Application factory for the Stashhook Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with probe endpoints and, when a validator is supplied, the
webhook receiver endpoint.

Usage
-----
Create a probe-only app::

    app = create_app()

Create an app that receives webhooks::

    from stashhook.api.app import AppDependencies, create_app
    from stashhook.webhooks import WebhookValidator

    deps = AppDependencies(
        validator=WebhookValidator(b"topsecret"),
        handler=process_delivery,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from stashhook.api.errors import register_error_handlers
from stashhook.api.health import ProbeResource

if typ.TYPE_CHECKING:
    from stashhook.api.webhooks import WebhookHandler
    from stashhook.webhooks.observability import WebhookEventLogger
    from stashhook.webhooks.validation import WebhookValidator

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/webhooks"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    validator
        Validator for inbound deliveries. When ``None`` the webhook route is
        not registered.
    handler
        Optional async callable invoked with every accepted delivery.
    event_logger
        Optional structured logger for delivery outcomes.

    """

    validator: WebhookValidator | None = None
    handler: WebhookHandler | None = None
    event_logger: WebhookEventLogger | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. Without a validator only
        ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    app = falcon.asgi.App()

    app.add_route("/health", ProbeResource("ok"))
    app.add_route("/ready", ProbeResource("ready"))

    if dependencies is not None and dependencies.validator is not None:
        from stashhook.api.webhooks import WebhookResource

        app.add_route(
            WEBHOOK_ROUTE,
            WebhookResource(
                dependencies.validator,
                handler=dependencies.handler,
                event_logger=dependencies.event_logger,
            ),
        )

    register_error_handlers(app)

    return app
