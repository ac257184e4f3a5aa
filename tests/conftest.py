"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx
import pytest
import structlog

from searchport.adapters.elasticsearch import ElasticsearchAdapter
from searchport.config.settings import Settings

ES = "http://localhost:9200"


class FakeElasticsearch:
    """Answers requests from a queue of canned responses and records them.

    Once the queue is exhausted every request gets ``200 {}``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []

    def respond(self, status: int, body: Any = None) -> FakeElasticsearch:
        if body is None:
            self._responses.append(httpx.Response(status))
        elif isinstance(body, str):
            self._responses.append(httpx.Response(status, text=body))
        else:
            self._responses.append(httpx.Response(status, json=body))
        return self

    def fail(self, exc: Exception) -> FakeElasticsearch:
        self._responses.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, str(r.url)) for r in self.requests]

    def json_body(self, i: int = -1) -> Any:
        return json.loads(self.requests[i].content)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        elasticsearch={"url": ES, "username": "admin", "password": "password"},
    )


@pytest.fixture
def backend() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
async def adapter(backend: FakeElasticsearch) -> AsyncIterator[ElasticsearchAdapter]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))
    yield ElasticsearchAdapter(url=ES, username="admin", password="password", client=client)
    await client.aclose()


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo ``setup_logging``'s root handler and level after a test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers[:] = [h for h in root.handlers if not isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)]
    root.setLevel(level)
