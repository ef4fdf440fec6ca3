"""Reconstruct open discussion threads from Gerrit's flat comment list.

Gerrit returns comments per file with only an ``in_reply_to`` back-reference,
never a tree. Rather than building one, each reply re-keys its chain: the
chain's state moves from the parent's ID to the reply's ID, so after one pass
every chain is stored under its most recent comment (the tip). Only the tip's
``unresolved`` flag decides whether the chain is still open.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterable, Mapping, Sequence

from gerritlens_core.gerrit.models import AccountInfo, CommentInfo

_NO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class OpenThread:
    """The tip of an unresolved chain and everyone who wrote in it."""

    tip: CommentInfo
    authors: tuple[AccountInfo, ...] = ()


def dedupe_accounts(accounts: Iterable[AccountInfo]) -> list[AccountInfo]:
    """Drop repeated accounts (by identity), keeping first-occurrence order."""
    seen: set[str] = set()
    out: list[AccountInfo] = []
    for account in accounts:
        if account.identity in seen:
            continue
        seen.add(account.identity)
        out.append(account)
    return out


def reconstruct_threads(comments: Mapping[str, Sequence[CommentInfo]]) -> list[OpenThread]:
    """Collapse every reply chain to its tip and return the unresolved ones.

    ``comments`` maps file path to that file's comments, earliest first.
    Threads come back oldest first by tip ``updated``, ties broken by comment
    ID. A reply whose parent is missing (pagination, deleted comment) starts
    a new chain.
    """
    open_tips: dict[str, CommentInfo] = {}
    participants: dict[str, list[AccountInfo]] = {}

    for path, path_comments in comments.items():
        for c in path_comments:
            if not c.path:
                c = replace(c, path=path)

            if c.in_reply_to:
                authors = participants.pop(c.in_reply_to, [])
                open_tips.pop(c.in_reply_to, None)
            else:
                authors = []

            authors.append(c.author)
            participants[c.id] = authors

            if c.unresolved:
                open_tips[c.id] = c

    tips = sorted(open_tips.values(), key=lambda c: (c.updated or _NO_TIMESTAMP, c.id))
    return [OpenThread(tip=tip, authors=tuple(dedupe_accounts(participants[tip.id]))) for tip in tips]
