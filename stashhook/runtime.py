"""Stashhook runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`stashhook.api.app.create_app` while keeping the
``stashhook.runtime:create_app`` entrypoint stable.

When ``STASHHOOK_WEBHOOK_SECRET`` or ``STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS``
is set, the runtime builds a webhook validator so the app accepts
``POST /webhooks``. Otherwise it starts in probe-only mode.

Configuration is driven by environment variables:

- ``STASHHOOK_HOST``: Bind address (default ``0.0.0.0``)
- ``STASHHOOK_PORT``: Listen port (default ``8080``)
- ``STASHHOOK_LOG_LEVEL``: Log level (default ``INFO``)
- ``STASHHOOK_WEBHOOK_SECRET``: Shared webhook secret
- ``STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS``: Accept deliveries without a secret
  (local development only)

Run the service directly with ``python -m stashhook.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from stashhook.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535

_WEBHOOK_ENV_VARS = ("STASHHOOK_WEBHOOK_SECRET", "STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS")


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid STASHHOOK_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def _webhooks_configured() -> bool:
    """Return True when any webhook environment variable is set."""
    return any(name in os.environ for name in _WEBHOOK_ENV_VARS)


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    Raises
    ------
    WebhookConfigError
        If webhook variables are present but no secret is set and unsigned
        deliveries are not allowed.

    """
    from stashhook.api.app import create_app as _create_api_app

    if not _webhooks_configured():
        log_warning(
            logger,
            "No webhook configuration found; serving probes only",
        )
        return _create_api_app()

    from stashhook.api.app import AppDependencies
    from stashhook.webhooks import WebhookConfig, WebhookValidator

    config = WebhookConfig.from_env()
    return _create_api_app(
        AppDependencies(validator=WebhookValidator(config.secret))
    )


def main() -> None:
    """Start the Stashhook runtime server using Granian.

    Reads ``STASHHOOK_HOST``, ``STASHHOOK_PORT``, and ``STASHHOOK_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("STASHHOOK_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("STASHHOOK_PORT", "8080"))
    log_level_str = os.environ.get("STASHHOOK_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid STASHHOOK_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting Stashhook runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "stashhook.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
