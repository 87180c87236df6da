"""Typed Bitbucket Server resource records embedded in webhook payloads.

Field names follow Python conventions and map to Bitbucket's camelCase wire
names through ``rename="camel"``. Every field has a default so payloads that
omit optional data still decode; unknown wire fields are ignored.
"""

from __future__ import annotations

import datetime as dt

import msgspec


class BitbucketRecord(
    msgspec.Struct, kw_only=True, frozen=True, rename="camel", omit_defaults=True
):
    """Base for Bitbucket wire records."""


_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.UTC)


def _from_epoch_millis(value: int | None) -> dt.datetime | None:
    """Convert a Bitbucket millisecond timestamp to an aware datetime."""
    if value is None:
        return None
    return _EPOCH + dt.timedelta(milliseconds=value)


class Link(BitbucketRecord):
    """Hyperlink, optionally named (clone links carry ``http`` or ``ssh``)."""

    href: str = ""
    name: str | None = None


class Links(BitbucketRecord):
    """Link collection attached to users, projects, and repositories."""

    self_: tuple[Link, ...] = msgspec.field(default=(), name="self")
    clone: tuple[Link, ...] = ()


class User(BitbucketRecord):
    """Bitbucket Server user account.

    Attributes
    ----------
    name : str
        Login name.
    email_address : str | None
        Primary e-mail address, when visible to the webhook.
    id : int
        Numeric user identifier.
    display_name : str
        Human-readable name.
    active : bool
        Whether the account is active.
    slug : str
        URL-safe user slug.
    type : str
        Account type (``NORMAL`` or ``SERVICE``).

    """

    name: str = ""
    email_address: str | None = None
    id: int = 0
    display_name: str = ""
    active: bool = False
    slug: str = ""
    type: str = ""
    links: Links | None = None


class Project(BitbucketRecord):
    """Project that owns repositories. Personal projects carry an owner."""

    key: str = ""
    id: int = 0
    name: str = ""
    description: str | None = None
    public: bool = False
    type: str = ""
    owner: User | None = None
    links: Links | None = None


class Repository(BitbucketRecord):
    """Bitbucket Server repository.

    ``origin`` is present on forks and names the repository they were
    forked from.
    """

    slug: str = ""
    id: int = 0
    name: str = ""
    description: str | None = None
    hierarchy_id: str = ""
    scm_id: str = ""
    state: str = ""
    status_message: str = ""
    forkable: bool = False
    project: Project | None = None
    public: bool = False
    origin: Repository | None = None
    links: Links | None = None

    @property
    def full_name(self) -> str:
        """Return ``PROJECT/slug``, or just the slug when no project is set."""
        if self.project is None or not self.project.key:
            return self.slug
        return f"{self.project.key}/{self.slug}"


class Ref(BitbucketRecord):
    """Branch or tag reference."""

    id: str = ""
    display_id: str = ""
    type: str = ""


class PushEventChange(BitbucketRecord):
    """Single ref update within a push.

    ``type`` is ``ADD``, ``UPDATE``, or ``DELETE``. Created refs have an
    all-zero ``from_hash`` and deleted refs an all-zero ``to_hash``.
    """

    ref: Ref | None = None
    ref_id: str = ""
    from_hash: str = ""
    to_hash: str = ""
    type: str = ""


class PullRequestRef(BitbucketRecord):
    """Source or target branch of a pull request."""

    id: str = ""
    display_id: str = ""
    latest_commit: str = ""
    repository: Repository | None = None


class PullRequestParticipant(BitbucketRecord):
    """User taking part in a pull request as author, reviewer, or participant.

    ``last_reviewed_commit`` is only populated for reviewers.
    """

    user: User | None = None
    last_reviewed_commit: str = ""
    role: str = ""
    approved: bool = False
    status: str = ""


class PullRequestTarget(BitbucketRecord):
    """Previous target branch reported by ``pr:modified``."""

    id: str = ""
    display_id: str = ""
    type: str = ""
    latest_commit: str = ""
    latest_changeset: str = ""


class PullRequest(BitbucketRecord):
    """Bitbucket Server pull request.

    ``created_date`` and ``updated_date`` are millisecond epoch timestamps as
    sent on the wire; use :attr:`created_at` and :attr:`updated_at` for
    datetimes.
    """

    id: int = 0
    version: int = 0
    title: str = ""
    description: str | None = None
    state: str = ""
    open: bool = False
    closed: bool = False
    created_date: int | None = None
    updated_date: int | None = None
    closed_date: int | None = None
    from_ref: PullRequestRef | None = None
    to_ref: PullRequestRef | None = None
    locked: bool = False
    author: PullRequestParticipant | None = None
    reviewers: tuple[PullRequestParticipant, ...] = ()
    participants: tuple[PullRequestParticipant, ...] = ()
    links: Links | None = None

    @property
    def created_at(self) -> dt.datetime | None:
        """Return the creation time as an aware UTC datetime."""
        return _from_epoch_millis(self.created_date)

    @property
    def updated_at(self) -> dt.datetime | None:
        """Return the last update time as an aware UTC datetime."""
        return _from_epoch_millis(self.updated_date)


__all__ = [
    "BitbucketRecord",
    "Link",
    "Links",
    "Project",
    "PullRequest",
    "PullRequestParticipant",
    "PullRequestRef",
    "PullRequestTarget",
    "PushEventChange",
    "Ref",
    "Repository",
    "User",
]
