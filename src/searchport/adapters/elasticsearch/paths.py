"""Elasticsearch resource paths for each operation.

Pure URL construction from the cluster origin, an index name and an optional
document key. Index names and keys are percent-encoded as single path
segments.
"""

from __future__ import annotations

from typing import NamedTuple
from urllib.parse import quote


class Route(NamedTuple):
    method: str
    url: str


def _segment(value: str) -> str:
    return quote(value, safe="")


def _index_url(origin: str, index: str) -> str:
    return f"{origin.rstrip('/')}/{_segment(index)}"


def _doc_url(origin: str, index: str, key: str) -> str:
    return f"{_index_url(origin, index)}/_doc/{_segment(key)}"


def create_index_route(origin: str, index: str) -> Route:
    return Route("PUT", _index_url(origin, index))


def index_exists_route(origin: str, index: str) -> Route:
    return Route("GET", _index_url(origin, index))


def delete_index_route(origin: str, index: str) -> Route:
    return Route("DELETE", _index_url(origin, index))


def get_doc_route(origin: str, index: str, key: str) -> Route:
    return Route("GET", _doc_url(origin, index, key))


def index_doc_route(origin: str, index: str, key: str) -> Route:
    return Route("PUT", _doc_url(origin, index, key))


def update_doc_route(origin: str, index: str, key: str) -> Route:
    # Full replacement, same resource as index_doc
    return Route("PUT", _doc_url(origin, index, key))


def remove_doc_route(origin: str, index: str, key: str) -> Route:
    return Route("DELETE", _doc_url(origin, index, key))


def bulk_route(origin: str) -> Route:
    """Bulk requests are cluster-scoped; each action line names its index."""
    return Route("POST", f"{origin.rstrip('/')}/_bulk")


def query_route(origin: str, index: str) -> Route:
    return Route("POST", f"{_index_url(origin, index)}/_search")


def cluster_health_route(origin: str) -> Route:
    return Route("GET", f"{origin.rstrip('/')}/_cluster/health")
