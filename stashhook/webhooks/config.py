"""Environment configuration for webhook validation.

Usage
-----
Load the secret from the environment:

>>> import os
>>> os.environ["STASHHOOK_WEBHOOK_SECRET"] = "topsecret"
>>> WebhookConfig.from_env().secret
b'topsecret'

"""

from __future__ import annotations

import dataclasses as dc
import os

from .errors import WebhookConfigError

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dc.dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Configuration for validating Bitbucket Server webhooks.

    Attributes
    ----------
    secret
        Shared secret configured on the Bitbucket Server webhook. Empty
        disables signature verification.
    allow_unsigned
        Explicit opt-in that permits an empty secret. Intended for local
        development only.

    """

    secret: bytes = b""
    allow_unsigned: bool = False

    def __post_init__(self) -> None:
        """Reject an empty secret unless unsigned deliveries are allowed."""
        if not self.secret and not self.allow_unsigned:
            raise WebhookConfigError.missing_secret()

    @staticmethod
    def _parse_flag(env_var: str) -> bool:
        """Read a boolean env var; unset or unrecognised values are false."""
        return os.environ.get(env_var, "").strip().lower() in _TRUTHY

    @classmethod
    def from_env(cls) -> WebhookConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``STASHHOOK_WEBHOOK_SECRET``: Shared webhook secret.
        - ``STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS``: ``1``, ``true``, ``yes`` or
          ``on`` to accept deliveries without a secret.

        Returns
        -------
        WebhookConfig
            Configuration instance built from the environment.

        Raises
        ------
        WebhookConfigError
            If no secret is set and unsigned deliveries are not allowed.

        """
        secret = os.environ.get("STASHHOOK_WEBHOOK_SECRET", "")
        return cls(
            secret=secret.encode("utf-8"),
            allow_unsigned=cls._parse_flag("STASHHOOK_ALLOW_UNSIGNED_WEBHOOKS"),
        )


__all__ = ["WebhookConfig"]
