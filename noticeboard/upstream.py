"""
HTTP transport to the upstream cause-list feed.

One GET per refresh, JSON in, Board out. Every way the request can fail
(network, HTTP status, body that is not JSON) surfaces as a single
UpstreamFetchError so the poll loop has one thing to catch.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import UpstreamFetchError
from .models import Board
from .normalizer import normalize

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "SC-Noticeboard-Simple/1.0"


def fetch_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> Any:
    """GET a URL and decode its JSON body.

    Raises:
        UpstreamFetchError: On transport errors, non-2xx responses or invalid JSON.
    """
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise UpstreamFetchError(
            f"Upstream request failed: {e}", details={"url": url}
        ) from e

    if not response.is_success:
        raise UpstreamFetchError(
            f"Upstream error: {response.status_code}",
            details={"url": url, "status_code": response.status_code},
        )

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamFetchError(
            "Upstream returned a body that is not JSON", details={"url": url}
        ) from e


class UpstreamClient:
    """Fetches and normalizes the cause-list feed.

    Usage:
        client = UpstreamClient(settings.upstream_url)
        board = client.fetch_board()
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def fetch_payload(self) -> Any:
        """Return the raw decoded feed payload."""
        logger.debug("Fetching upstream board from %s", self.url)
        return fetch_json(
            self.url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            transport=self._transport,
        )

    def fetch_board(self) -> Board:
        """Fetch the feed and normalize it into a Board."""
        return normalize(self.fetch_payload())
