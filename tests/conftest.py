"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from stashhook.webhooks import WebhookValidator

WEBHOOK_SECRET = b"topsecret"


@pytest.fixture
def webhook_secret() -> bytes:
    """Return the shared secret used to sign test deliveries."""
    return WEBHOOK_SECRET


@pytest.fixture
def validator(webhook_secret: bytes) -> WebhookValidator:
    """Return a validator that verifies signatures with the test secret."""
    return WebhookValidator(webhook_secret)
