"""HTTP transport for the Gerrit REST API.

Every request goes to the authenticated ``/a/`` endpoint with HTTP basic
auth. Gerrit prefixes each JSON response with ``)]}'`` followed by a newline
to defeat XSSI; the prefix is verified and stripped before decoding.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from gerritlens_core.config import ClientConfig

logger = logging.getLogger(__name__)

XSSI_PREFIX = ")]}'\n"


class GerritError(Exception):
    """A request to Gerrit failed or returned something that is not Gerrit JSON."""


class CallError(GerritError):
    """Gerrit answered with a non-200 status."""

    def __init__(self, message: str, status_code: int, response: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class GerritClient:
    def __init__(self, config: ClientConfig, session: requests.Session | None = None):
        self.config = config
        self._session = session if session is not None else requests.Session()
        if config.user:
            self._session.auth = (config.user, config.password)

    def call(self, method: str, path: str, body: Any = None) -> Any:
        """Call ``path`` (relative to the server root, without ``/a/``) and return the decoded JSON."""
        if path.startswith("/a/"):
            raise ValueError(f"invalid url: must not begin with /a/: {path!r}")
        path = path.removeprefix("/")
        url = f"{self.config.root_url}/a/{path}"

        headers = {}
        data = None
        if body is not None:
            data = json.dumps(body)
            headers["Content-Type"] = "application/json; charset=UTF-8"

        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, data=data, headers=headers, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise GerritError(f"HTTP request failed: {e}") from e

        if response.status_code != 200:
            raise CallError(
                f"response status != 200 ({response.status_code} {response.reason})",
                status_code=response.status_code,
                response=response.text,
            )

        text = response.text
        if not text.startswith(XSSI_PREFIX):
            raise GerritError(f"expected prefix {XSSI_PREFIX!r}, got {text[:len(XSSI_PREFIX)]!r}")
        try:
            return json.loads(text[len(XSSI_PREFIX) :])
        except json.JSONDecodeError as e:
            raise GerritError(f"could not decode response from {url}: {e}") from e

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> GerritClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
