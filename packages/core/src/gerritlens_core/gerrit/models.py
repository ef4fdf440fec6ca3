"""Gerrit REST entities used by gerritlens.

Only the fields gerritlens reads are decoded. Every ``from_dict`` tolerates
missing keys because Gerrit omits fields that were not requested via
``o=`` options (e.g. ``username`` without DETAILED_ACCOUNTS).

https://gerrit-review.googlesource.com/Documentation/rest-api-changes.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def parse_timestamp(value: str | None) -> datetime | None:
    """Decode a Gerrit timestamp (``2013-02-01 09:59:32.126000000``, UTC).

    Gerrit sends nanoseconds; the fraction is truncated to microseconds.
    """
    if not value:
        return None
    base, _, fraction = value.partition(".")
    parsed = datetime.strptime(base, "%Y-%m-%d %H:%M:%S")
    if fraction:
        if not fraction.isdigit():
            raise ValueError(f"unknown date format {value!r}")
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class AccountInfo:
    name: str = ""
    email: str = ""
    username: str = ""
    account_id: int = 0

    @property
    def identity(self) -> str:
        """Key used to tell accounts apart; the username when Gerrit sent one."""
        return self.username or self.email or (str(self.account_id) if self.account_id else self.name)

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or str(self.account_id)

    @classmethod
    def from_dict(cls, d: dict | None) -> AccountInfo:
        d = d or {}
        return cls(
            name=d.get("name", ""),
            email=d.get("email", ""),
            username=d.get("username", ""),
            account_id=d.get("_account_id", 0),
        )


@dataclass(frozen=True)
class CommentRange:
    """Range of an inline comment; start inclusive, end exclusive."""

    start_line: int = 0
    start_character: int = 0
    end_line: int = 0
    end_character: int = 0

    @classmethod
    def from_dict(cls, d: dict | None) -> CommentRange | None:
        if not d:
            return None
        return cls(
            start_line=d.get("start_line", 0),
            start_character=d.get("start_character", 0),
            end_line=d.get("end_line", 0),
            end_character=d.get("end_character", 0),
        )


@dataclass(frozen=True)
class CommentInfo:
    id: str
    author: AccountInfo = field(default_factory=AccountInfo)
    in_reply_to: str = ""
    path: str = ""
    line: int = 0
    patch_set: int = 0
    updated: datetime | None = None
    message: str = ""
    unresolved: bool = False
    range: CommentRange | None = None
    change_message_id: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> CommentInfo:
        return cls(
            id=d["id"],
            author=AccountInfo.from_dict(d.get("author")),
            in_reply_to=d.get("in_reply_to", ""),
            path=d.get("path", ""),
            line=d.get("line", 0),
            patch_set=d.get("patch_set", 0),
            updated=parse_timestamp(d.get("updated")),
            message=d.get("message", ""),
            unresolved=bool(d.get("unresolved", False)),
            range=CommentRange.from_dict(d.get("range")),
            change_message_id=d.get("change_message_id", ""),
        )


@dataclass(frozen=True)
class ChangeMessageInfo:
    id: str
    author: AccountInfo | None = None  # None for messages posted by Gerrit itself
    date: datetime | None = None
    message: str = ""
    revision_number: int = 0

    @classmethod
    def from_dict(cls, d: dict) -> ChangeMessageInfo:
        author = d.get("author")
        return cls(
            id=d.get("id", ""),
            author=AccountInfo.from_dict(author) if author else None,
            date=parse_timestamp(d.get("date")),
            message=d.get("message", ""),
            revision_number=d.get("_revision_number", 0),
        )


@dataclass(frozen=True)
class CommitInfo:
    subject: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> CommitInfo:
        d = d or {}
        return cls(subject=d.get("subject", ""), message=d.get("message", ""))


@dataclass(frozen=True)
class RevisionInfo:
    number: int = 0
    commit: CommitInfo = field(default_factory=CommitInfo)
    created: datetime | None = None
    uploader: AccountInfo = field(default_factory=AccountInfo)

    @classmethod
    def from_dict(cls, d: dict) -> RevisionInfo:
        return cls(
            number=d.get("_number", 0),
            commit=CommitInfo.from_dict(d.get("commit")),
            created=parse_timestamp(d.get("created")),
            uploader=AccountInfo.from_dict(d.get("uploader")),
        )


@dataclass(frozen=True)
class ChangeInfo:
    """A change as returned by ``GET /changes/{id}``."""

    id: str
    project: str = ""
    branch: str = ""
    change_id: str = ""
    subject: str = ""
    number: int = 0
    owner: AccountInfo = field(default_factory=AccountInfo)
    created: datetime | None = None
    updated: datetime | None = None
    submitted: datetime | None = None
    total_comment_count: int = 0
    unresolved_comment_count: int = 0
    messages: list[ChangeMessageInfo] = field(default_factory=list)
    reviewers: dict[str, list[AccountInfo]] = field(default_factory=dict)
    revisions: dict[str, RevisionInfo] = field(default_factory=dict)
    submittable: bool = False  # only set when SUBMITTABLE is requested

    @classmethod
    def from_dict(cls, d: dict) -> ChangeInfo:
        return cls(
            id=d.get("id", ""),
            project=d.get("project", ""),
            branch=d.get("branch", ""),
            change_id=d.get("change_id", ""),
            subject=d.get("subject", ""),
            number=d.get("_number", 0),
            owner=AccountInfo.from_dict(d.get("owner")),
            created=parse_timestamp(d.get("created")),
            updated=parse_timestamp(d.get("updated")),
            submitted=parse_timestamp(d.get("submitted")),
            total_comment_count=d.get("total_comment_count", 0),
            unresolved_comment_count=d.get("unresolved_comment_count", 0),
            messages=[ChangeMessageInfo.from_dict(m) for m in d.get("messages") or []],
            reviewers={
                state: [AccountInfo.from_dict(a) for a in accounts]
                for state, accounts in (d.get("reviewers") or {}).items()
            },
            revisions={sha: RevisionInfo.from_dict(r) for sha, r in (d.get("revisions") or {}).items()},
            submittable=bool(d.get("submittable", False)),
        )
