"""Gerrit credential resolution with ~/.netrc fallback.

Resolution order (stops at first success):
  1. GERRIT_USER / GERRIT_PASSWORD environment variables (CI / explicit override)
  2. The ~/.netrc entry for the Gerrit host (the HTTP password generated in
     Gerrit's settings page, as git itself uses it)
"""

from __future__ import annotations

import logging
import netrc
import os
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def resolve_credentials(url: str | None) -> tuple[str, str] | None:
    """Return (user, password) for the Gerrit at ``url``, or None.

    Never raises — callers should check for None and emit a UsageError.
    """
    user = os.environ.get("GERRIT_USER")
    password = os.environ.get("GERRIT_PASSWORD")
    if user and password:
        return user, password

    host = urlparse(url).hostname if url else None
    if not host:
        return None

    try:
        entry = netrc.netrc().authenticators(host)
    except (OSError, netrc.NetrcParseError) as e:
        logger.debug("No usable .netrc: %s", e)
        return None

    if entry:
        login, _, secret = entry
        if login and secret:
            logger.debug("Resolved Gerrit credentials for %s via .netrc.", host)
            return login, secret

    return None
