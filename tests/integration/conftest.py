"""Integration test fixtures — A live Elasticsearch cluster.

Expects a single-node cluster with security disabled at localhost:9200, e.g.:
    docker run -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false elasticsearch:8.15.0

Tests are skipped when the cluster is not reachable.
"""

from __future__ import annotations

import time

import httpx
import pytest

ES_HOST = "http://localhost:9200"

MOCK_DOCUMENTS = [
    {
        "id": "tgg",
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "rating": 4,
    },
    {
        "id": "moby",
        "title": "Moby Dick",
        "author": "Herman Melville",
        "rating": 3,
    },
    {
        "_id": "ulysses",
        "title": "Ulysses",
        "author": "James Joyce",
        "rating": 4,
    },
]


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture
def mock_documents() -> list[dict]:
    return [dict(doc) for doc in MOCK_DOCUMENTS]


@pytest.fixture
def refresh(elasticsearch_ready: str):
    """Make recent writes to an index visible to search."""

    def _refresh(index: str) -> None:
        httpx.post(f"{elasticsearch_ready}/{index}/_refresh", timeout=30).raise_for_status()

    return _refresh


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running."""
    if not _wait_for_service(ES_HOST):
        pytest.skip("Elasticsearch not available at localhost:9200")
    return ES_HOST


@pytest.fixture
def index_name(elasticsearch_ready: str, request: pytest.FixtureRequest):
    """A fresh index name per test, deleted afterwards."""
    name = f"searchport-{request.node.name.lower().replace('[', '-').replace(']', '')}"
    httpx.delete(f"{elasticsearch_ready}/{name}", params={"ignore_unavailable": "true"}, timeout=30)
    yield name
    httpx.delete(f"{elasticsearch_ready}/{name}", params={"ignore_unavailable": "true"}, timeout=30)
