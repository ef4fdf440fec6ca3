"""Summarise a change: metadata, reviewer activity and open comment threads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from gerritlens_core.gerrit.changes import get_change, list_change_comments
from gerritlens_core.gerrit.client import GerritClient, GerritError
from gerritlens_core.gerrit.models import AccountInfo, ChangeInfo, ChangeMessageInfo, CommentInfo
from gerritlens_core.thread import dedupe_accounts, reconstruct_threads

logger = logging.getLogger(__name__)

CHANGE_OPTIONS = ("MESSAGES", "DETAILED_LABELS", "CURRENT_REVISION", "CURRENT_COMMIT", "DETAILED_ACCOUNTS")


class SummaryError(RuntimeError):
    """A change could not be summarised because a fetch from Gerrit failed."""


def thread_url(project: str, change_id: str, patch_set: int, path: str, line: int) -> str:
    """Server-relative link to a comment line in the Gerrit web UI."""
    return f"/c/{project}/+/{change_id}/{patch_set}/{path}#{line}"


@dataclass(frozen=True)
class Thread:
    """An unresolved comment thread, represented by its latest comment."""

    project: str
    change_id: str
    path: str
    line: int
    patch_set: int
    authors: tuple[AccountInfo, ...]
    message: str
    last_comment: CommentInfo

    @property
    def url(self) -> str:
        return thread_url(self.project, self.change_id, self.patch_set, self.path, self.line)

    def absolute_url(self, root_url: str) -> str:
        return root_url.rstrip("/") + self.url


@dataclass(frozen=True)
class Summary:
    change_id: str
    project: str
    branch: str
    subject: str
    latest_commit_message: str = ""
    all_reviewers: tuple[AccountInfo, ...] = ()
    active_reviewers: tuple[AccountInfo, ...] = ()
    cced: tuple[AccountInfo, ...] = ()
    created: datetime | None = None
    updated: datetime | None = None
    submitted: datetime | None = None
    comments: int = 0
    unresolved_comments: int = 0
    threads: tuple[Thread, ...] = ()


def active_reviewers(messages: list[ChangeMessageInfo]) -> list[AccountInfo]:
    """Accounts that posted on the change, first-seen order.

    Messages Gerrit posts itself carry no author and are skipped.
    """
    return dedupe_accounts(m.author for m in messages if m.author is not None)


def _latest_commit_message(change: ChangeInfo) -> str:
    # Only trustworthy when CURRENT_REVISION narrowed the map to one entry.
    if len(change.revisions) != 1:
        return ""
    revision = next(iter(change.revisions.values()))
    return revision.commit.message


def summarise(client: GerritClient, change_id: str) -> Summary:
    """Build the Summary for ``change_id``.

    Makes one request for the change and, only when it has unresolved
    comments, a second one for the comments. Any failed request raises
    SummaryError; there are no partial results.
    """
    try:
        change = get_change(client, change_id, *CHANGE_OPTIONS)
    except GerritError as e:
        raise SummaryError(f"could not get change {change_id}: {e}") from e

    number = str(change.number)
    base = dict(
        change_id=number,
        project=change.project,
        branch=change.branch,
        subject=change.subject,
        latest_commit_message=_latest_commit_message(change),
        all_reviewers=tuple(change.reviewers.get("REVIEWER", ())),
        active_reviewers=tuple(active_reviewers(change.messages)),
        cced=tuple(change.reviewers.get("CC", ())),
        created=change.created,
        updated=change.updated,
        submitted=change.submitted,
        comments=change.total_comment_count,
        unresolved_comments=change.unresolved_comment_count,
    )

    if change.unresolved_comment_count == 0:
        logger.debug("Change %s has no unresolved comments; skipping comment fetch.", number)
        return Summary(**base)

    try:
        comments = list_change_comments(client, change_id)
    except GerritError as e:
        raise SummaryError(f"could not list change comments for {change_id}: {e}") from e

    open_threads = reconstruct_threads(comments)
    logger.debug("Change %s: %d open thread(s) from %d file(s).", number, len(open_threads), len(comments))

    threads = tuple(
        Thread(
            project=change.project,
            change_id=number,
            path=t.tip.path,
            line=t.tip.line,
            patch_set=t.tip.patch_set,
            authors=t.authors,
            message=t.tip.message,
            last_comment=t.tip,
        )
        for t in open_threads
    )
    return Summary(**base, threads=threads)
