"""Stashhook HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives Bitbucket Server webhook deliveries.

Public API
----------
create_app
    Application factory that configures probe endpoints and, when a
    validator is provided, the ``POST /webhooks`` receiver.
AppDependencies
    Collaborators passed to ``create_app``.
"""

from stashhook.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
