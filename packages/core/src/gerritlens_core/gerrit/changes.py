from __future__ import annotations

from urllib.parse import quote, urlencode

from gerritlens_core.gerrit.client import GerritClient, GerritError
from gerritlens_core.gerrit.models import ChangeInfo, CommentInfo

# Raised by from_dict on missing keys, unexpected JSON shapes or bad timestamps.
_DECODE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


def _change_path(change_id: str, suffix: str = "", options: tuple[str, ...] = ()) -> str:
    path = f"/changes/{quote(change_id, safe='')}{suffix}"
    if options:
        path += "?" + urlencode([("o", o) for o in options])
    return path


def get_change(client: GerritClient, change_id: str, *options: str) -> ChangeInfo:
    """Fetch a change; ``options`` select optional fields (MESSAGES, CURRENT_REVISION, ...)."""
    raw = client.call("GET", _change_path(change_id, options=options))
    try:
        return ChangeInfo.from_dict(raw)
    except _DECODE_ERRORS as e:
        raise GerritError(f"could not decode change {change_id}: {e!r}") from e


def list_change_comments(client: GerritClient, change_id: str, *options: str) -> dict[str, list[CommentInfo]]:
    """Return the published comments of all revisions, keyed by file path."""
    raw = client.call("GET", _change_path(change_id, "/comments", options)) or {}
    try:
        return {path: [CommentInfo.from_dict(c) for c in comments] for path, comments in raw.items()}
    except _DECODE_ERRORS as e:
        raise GerritError(f"could not decode comments of change {change_id}: {e!r}") from e
