"""Bitbucket Server webhook event records and the event-key registry.

Each of the thirteen supported ``X-Event-Key`` values maps to exactly one
event class. :data:`WebhookEvent` is the closed union of those classes, so
consumers can dispatch with ``match`` and have type checkers flag missing
cases.

Example:
>>> event = decode_event("repo:forked", b'{"eventKey": "repo:forked"}')
>>> type(event).__name__
'RepositoryForkedEvent'

Payload reference:
https://confluence.atlassian.com/bitbucketserver070/event-payload-996644369.html
"""

from __future__ import annotations

import datetime as dt
import enum
import types
import typing as typ

import msgspec

from .errors import MalformedPayloadError, UnknownEventKeyError
from .models import (
    BitbucketRecord,
    PullRequest,
    PullRequestParticipant,
    PullRequestTarget,
    PushEventChange,
    Repository,
    User,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class EventKey(enum.StrEnum):
    """``X-Event-Key`` values with a decodable payload shape."""

    REPOSITORY_PUSH = "repo:refs_changed"
    REPOSITORY_MODIFIED = "repo:modified"
    REPOSITORY_FORKED = "repo:forked"
    PULL_REQUEST_OPENED = "pr:opened"
    PULL_REQUEST_MODIFIED = "pr:modified"
    PULL_REQUEST_BRANCH_UPDATED = "pr:from_ref_updated"
    PULL_REQUEST_REVIEWERS_UPDATED = "pr:reviewer:updated"
    PULL_REQUEST_APPROVED = "pr:reviewer:approved"
    PULL_REQUEST_UNAPPROVED = "pr:reviewer:unapproved"
    PULL_REQUEST_NEEDS_WORK = "pr:reviewer:needs_work"
    PULL_REQUEST_MERGED = "pr:merged"
    PULL_REQUEST_DECLINED = "pr:declined"
    PULL_REQUEST_DELETED = "pr:deleted"


class _Event(BitbucketRecord):
    """Fields shared by every webhook payload.

    ``date`` is kept as sent; Bitbucket uses ISO-8601 with ``+HHMM`` offsets.
    """

    event_key: str = ""
    date: str = ""
    actor: User | None = None

    @property
    def occurred_at(self) -> dt.datetime | None:
        """Return ``date`` as a datetime, or ``None`` if absent or invalid."""
        if not self.date:
            return None
        try:
            return dt.datetime.fromisoformat(self.date)
        except ValueError:
            return None


class PushEvent(_Event):
    """Commits pushed, or a branch or tag created or deleted."""

    EVENT_KEY = EventKey.REPOSITORY_PUSH

    repository: Repository | None = None
    changes: tuple[PushEventChange, ...] = ()


class RepositoryModifiedEvent(_Event):
    """Repository renamed or moved; carries before and after snapshots."""

    EVENT_KEY = EventKey.REPOSITORY_MODIFIED

    old: Repository | None = None
    new: Repository | None = None


class RepositoryForkedEvent(_Event):
    """Repository forked. ``repository`` is the fork; its origin is set."""

    EVENT_KEY = EventKey.REPOSITORY_FORKED

    repository: Repository | None = None


class _PullRequestEvent(_Event):
    """Payload shape shared by the pull request lifecycle events."""

    pull_request: PullRequest | None = None


class PullRequestOpenedEvent(_PullRequestEvent):
    """Pull request opened or reopened."""

    EVENT_KEY = EventKey.PULL_REQUEST_OPENED


class PullRequestMergedEvent(_PullRequestEvent):
    """Pull request merged."""

    EVENT_KEY = EventKey.PULL_REQUEST_MERGED


class PullRequestDeclinedEvent(_PullRequestEvent):
    """Pull request declined."""

    EVENT_KEY = EventKey.PULL_REQUEST_DECLINED


class PullRequestDeletedEvent(_PullRequestEvent):
    """Pull request deleted."""

    EVENT_KEY = EventKey.PULL_REQUEST_DELETED


class PullRequestModifiedEvent(_PullRequestEvent):
    """Pull request title, description, or target branch changed."""

    EVENT_KEY = EventKey.PULL_REQUEST_MODIFIED

    previous_title: str = ""
    previous_description: str | None = None
    previous_target: PullRequestTarget | None = None


class PullRequestBranchUpdatedEvent(_PullRequestEvent):
    """Source branch of a pull request received new commits."""

    EVENT_KEY = EventKey.PULL_REQUEST_BRANCH_UPDATED

    previous_from_hash: str = ""


class PullRequestReviewersUpdatedEvent(_PullRequestEvent):
    """Reviewers added to or removed from a pull request."""

    EVENT_KEY = EventKey.PULL_REQUEST_REVIEWERS_UPDATED

    added_reviewers: tuple[User, ...] = ()
    removed_reviewers: tuple[User, ...] = ()


class _PullRequestReviewerEvent(_PullRequestEvent):
    """Payload shape shared by reviewer status changes."""

    participant: PullRequestParticipant | None = None
    previous_status: str = ""


class PullRequestApprovedEvent(_PullRequestReviewerEvent):
    """Reviewer approved a pull request."""

    EVENT_KEY = EventKey.PULL_REQUEST_APPROVED


class PullRequestUnapprovedEvent(_PullRequestReviewerEvent):
    """Reviewer withdrew an approval."""

    EVENT_KEY = EventKey.PULL_REQUEST_UNAPPROVED


class PullRequestNeedsWorkEvent(_PullRequestReviewerEvent):
    """Reviewer marked a pull request as needing work."""

    EVENT_KEY = EventKey.PULL_REQUEST_NEEDS_WORK


WebhookEvent: typ.TypeAlias = (
    PushEvent
    | RepositoryModifiedEvent
    | RepositoryForkedEvent
    | PullRequestOpenedEvent
    | PullRequestModifiedEvent
    | PullRequestBranchUpdatedEvent
    | PullRequestReviewersUpdatedEvent
    | PullRequestApprovedEvent
    | PullRequestUnapprovedEvent
    | PullRequestNeedsWorkEvent
    | PullRequestMergedEvent
    | PullRequestDeclinedEvent
    | PullRequestDeletedEvent
)

_EVENT_CLASSES: tuple[type[WebhookEvent], ...] = typ.get_args(WebhookEvent)

EVENT_TYPES: typ.Final[cabc.Mapping[str, type[WebhookEvent]]] = (
    types.MappingProxyType({cls.EVENT_KEY.value: cls for cls in _EVENT_CLASSES})
)


def event_type_for(event_key: str) -> type[WebhookEvent]:
    """Return the event class registered for *event_key*.

    Raises
    ------
    UnknownEventKeyError
        If *event_key* is not a recognised event key.

    """
    try:
        return EVENT_TYPES[str(event_key)]
    except KeyError:
        raise UnknownEventKeyError(event_key) from None


def _drop_nulls(value: object) -> object:
    """Remove ``null`` members from JSON objects, recursively.

    Bitbucket sends ``null`` for unset fields; dropping them lets every field
    fall back to its default instead of failing type validation.
    """
    if isinstance(value, dict):
        return {
            key: _drop_nulls(item) for key, item in value.items() if item is not None
        }
    if isinstance(value, list):
        return [_drop_nulls(item) for item in value]
    return value


def decode_event(event_key: str, payload: bytes) -> WebhookEvent:
    """Decode *payload* into the event class selected by *event_key*.

    Object members that are ``null`` are treated as absent, so the field
    keeps its default.

    Parameters
    ----------
    event_key : str
        Value of the ``X-Event-Key`` header.
    payload : bytes
        Validated JSON payload.

    Returns
    -------
    WebhookEvent
        A freshly decoded event record.

    Raises
    ------
    UnknownEventKeyError
        If *event_key* is not recognised. Callers should acknowledge and
        skip such deliveries.
    MalformedPayloadError
        If *payload* is not valid JSON for the selected shape.

    """
    event_type = event_type_for(event_key)
    try:
        document = _drop_nulls(msgspec.json.decode(payload))
        return msgspec.convert(document, type=event_type)
    except msgspec.DecodeError as exc:
        raise MalformedPayloadError(str(exc), event_key=event_key) from exc


__all__ = [
    "EVENT_TYPES",
    "EventKey",
    "PullRequestApprovedEvent",
    "PullRequestBranchUpdatedEvent",
    "PullRequestDeclinedEvent",
    "PullRequestDeletedEvent",
    "PullRequestMergedEvent",
    "PullRequestModifiedEvent",
    "PullRequestNeedsWorkEvent",
    "PullRequestOpenedEvent",
    "PullRequestReviewersUpdatedEvent",
    "PullRequestUnapprovedEvent",
    "PushEvent",
    "RepositoryForkedEvent",
    "RepositoryModifiedEvent",
    "WebhookEvent",
    "decode_event",
    "event_type_for",
]
