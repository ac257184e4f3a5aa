"""HTTP call layer — The only code that talks to Elasticsearch.

A call issues one request, checks the response against the operation's
success predicate and either returns the parsed JSON body or raises
``BackendResponseError`` with the parsed (or raw) error body. Nothing here
retries, and no timeout is applied beyond the one configured on the
``httpx.AsyncClient``.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from typing import Any

import httpx

from searchport.adapters.base.exceptions import BackendResponseError, TransportError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
NDJSON_CONTENT_TYPE = "application/x-ndjson"

Predicate = Callable[[httpx.Response], bool]


def create_headers(username: str | None = None, password: str | None = None) -> dict[str, str]:
    """Build the headers sent with every request.

    A Basic ``authorization`` header is added only when both credentials
    are present.
    """
    headers = {
        "Content-Type": JSON_CONTENT_TYPE,
        "Accept": JSON_CONTENT_TYPE,
    }
    if username and password:
        token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        headers["authorization"] = f"Basic {token}"
    return headers


def status_below(limit: int) -> Predicate:
    return lambda res: res.status_code < limit


def status_is(*codes: int) -> Predicate:
    return lambda res: res.status_code in codes


def parse_body(response: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to the raw text."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text


def handle_response(response: httpx.Response, predicate: Predicate) -> Any:
    """Resolve a response against a success predicate.

    Returns:
        The parsed body when the predicate holds.

    Raises:
        BackendResponseError: When it does not.
    """
    body = parse_body(response)
    if predicate(response):
        return body
    raise BackendResponseError(response.status_code, body)


class HttpCaller:
    """Issues requests against Elasticsearch with a fixed set of headers.

    Args:
        client: The HTTP client to send requests with. Its lifecycle belongs
            to the caller.
        headers: Headers added to every request.
    """

    def __init__(self, client: httpx.AsyncClient, headers: dict[str, str] | None = None) -> None:
        self._client = client
        self._headers = dict(headers or {})

    async def issue(
        self,
        method: str,
        url: str,
        *,
        content: str | bytes | None = None,
        content_type: str | None = None,
    ) -> httpx.Response:
        """Send one request and return the raw response.

        Raises:
            TransportError: When no response could be obtained.
        """
        headers = dict(self._headers)
        if content_type:
            headers["Content-Type"] = content_type

        logger.debug("%s %s", method, url)
        try:
            return await self._client.request(method, url, headers=headers, content=content)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    async def call(
        self,
        method: str,
        url: str,
        predicate: Predicate,
        *,
        content: str | bytes | None = None,
        content_type: str | None = None,
    ) -> Any:
        """Send one request and resolve it against ``predicate``."""
        response = await self.issue(method, url, content=content, content_type=content_type)
        return handle_response(response, predicate)
