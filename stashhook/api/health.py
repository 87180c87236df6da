"""Liveness and readiness probe resources.

Usage
-----
Register the probes on the Falcon app::

    app.add_route("/health", ProbeResource("ok"))
    app.add_route("/ready", ProbeResource("ready"))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["ProbeResource"]


class ProbeResource:
    """Stateless probe answering ``GET`` with ``{"status": <status>}``."""

    def __init__(self, status: str) -> None:
        """Store the status string returned by every request."""
        self._status = status

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Respond with HTTP 200 and the configured status."""
        resp.media = {"status": self._status}
        resp.status = HTTPStatus.OK
