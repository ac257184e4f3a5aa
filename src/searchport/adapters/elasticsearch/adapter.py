"""Elasticsearch adapter — Document store and search over the REST API.

Drives Elasticsearch (v7+) through plain HTTP calls made with ``httpx``.
Behaviour Elasticsearch does not provide natively is emulated with short,
strictly sequential call chains:

  - ``index_doc`` refuses to overwrite: it checks the index exists, then
    that the key is free, then writes.
  - ``remove_doc`` treats a missing document as already removed.
  - ``bulk`` sends one NDJSON request and reports every item separately.

Every operation resolves to a result model. Backend failures are normalized
by :mod:`searchport.adapters.elasticsearch.errors` and returned, never raised.

Known limitation: the existence pre-check in ``index_doc`` is best effort.
Two concurrent calls for the same key can both find it free and both write;
the later write wins. Nothing here serializes callers.

Usage::

    async with ElasticsearchAdapter("http://localhost:9200", username="admin", password="admin") as es:
        await es.create_index(IndexSpec(index="movies", fields=["title"]))
        await es.index_doc("movies", "tgg", {"id": "tgg", "title": "The Great Gatsby"})
        result = await es.query("movies", QuerySpec(query="gatsby", fields=["title"]))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

from searchport.adapters.base.adapter import AdapterHealth, SearchPortAdapter
from searchport.adapters.base.exceptions import (
    AdapterError,
    BackendResponseError,
    ConfigurationError,
    TransportError,
)
from searchport.adapters.elasticsearch import paths
from searchport.adapters.elasticsearch.aliasing import from_alias, to_alias
from searchport.adapters.elasticsearch.errors import (
    ErrorContext,
    is_failure,
    to_backend_error,
    translate_error,
)
from searchport.adapters.elasticsearch.http import (
    NDJSON_CONTENT_TYPE,
    HttpCaller,
    Predicate,
    create_headers,
    status_below,
    status_is,
)
from searchport.adapters.elasticsearch.payloads import (
    bulk_doc_id,
    bulk_payload,
    encode,
    mappings_payload,
    query_payload,
)
from searchport.models.document import Document, IndexSpec
from searchport.models.query import QuerySpec
from searchport.models.result import (
    BulkItemOk,
    BulkItemResult,
    BulkResult,
    DocResult,
    NormalizedError,
    OkResult,
    QueryResult,
)

if TYPE_CHECKING:
    from searchport.config.settings import ElasticsearchSettings

logger = logging.getLogger(__name__)

DOCUMENT_CONFLICT = NormalizedError(status=409, msg="document conflict")
MISSING_ID = NormalizedError(status=422, msg="Each document must have an id or _id field")

_SUCCESS = status_below(400)


def _index_context(index: str) -> ErrorContext:
    return ErrorContext(subject=f"index {index}", index=f"index {index}")


def _doc_context(index: str, key: str) -> ErrorContext:
    return ErrorContext(subject=f"document at key {key}", index=f"index {index}")


def _hit_source(hit: Any) -> dict[str, Any]:
    source = hit.get("_source") if isinstance(hit, Mapping) else None
    return dict(from_alias(source)) if isinstance(source, Mapping) else {}


def origin_of(url: str) -> str:
    """Reduce a configured URL to its origin (scheme, host and port).

    Raises:
        ConfigurationError: If ``url`` is not an absolute http(s) URL.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid Elasticsearch URL {url!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(f"Invalid Elasticsearch URL {url!r}: expected http(s)://host[:port]")
    host = f"[{parsed.host}]" if ":" in parsed.host else parsed.host
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme}://{host}{port}"


class ElasticsearchAdapter(SearchPortAdapter):
    """Search port adapter for Elasticsearch.

    Args:
        url: Cluster URL, e.g. ``"http://localhost:9200"``. Only the origin
            is used.
        username: Optional basic-auth username.
        password: Optional basic-auth password.
        timeout: HTTP request timeout in seconds.
        verify_certs: Whether to verify TLS certificates.
        client: Pre-built ``httpx.AsyncClient`` to send requests with. When
            given, the adapter is ready without ``initialize()`` and never
            closes the client.
    """

    def __init__(
        self,
        url: str = "http://localhost:9200",
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        verify_certs: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._origin = origin_of(url)
        self._username = username
        self._timeout = timeout
        self._verify_certs = verify_certs
        self._headers = create_headers(username, password)
        self._owns_client = client is None
        self._client = client
        self._http: HttpCaller | None = HttpCaller(client, self._headers) if client is not None else None

    @classmethod
    def from_settings(cls, settings: ElasticsearchSettings, **kwargs: Any) -> ElasticsearchAdapter:
        """Build an adapter from connection settings.

        Raises:
            ConfigurationError: If no URL is configured.
        """
        if not settings.url:
            raise ConfigurationError("Elasticsearch URL is required (set SEARCHPORT_ELASTICSEARCH__URL).")
        return cls(
            url=settings.url,
            username=settings.username,
            password=settings.password,
            timeout=settings.timeout,
            verify_certs=settings.verify_certs,
            **kwargs,
        )

    @property
    def name(self) -> str:
        return "elasticsearch"

    @property
    def origin(self) -> str:
        return self._origin

    async def initialize(self) -> None:
        """Create the ``httpx.AsyncClient`` unless one was supplied."""
        if self._http is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            verify=self._verify_certs,
        )
        self._http = HttpCaller(self._client, self._headers)
        logger.info("Elasticsearch adapter ready for %s (user: %s)", self._origin, self._username or "-")

    async def shutdown(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._http = None

    async def __aenter__(self) -> ElasticsearchAdapter:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    # ── Plumbing ─────────────────────────────────────────────────────────

    async def _send(
        self,
        route: paths.Route,
        predicate: Predicate,
        context: ErrorContext,
        *,
        content: str | None = None,
        content_type: str | None = None,
    ) -> Any | NormalizedError:
        """Issue one call; return the parsed body or the normalized failure."""
        if self._http is None:
            raise AdapterError("Elasticsearch adapter not initialized. Call initialize() first.")

        try:
            return await self._http.call(
                route.method,
                route.url,
                predicate,
                content=content,
                content_type=content_type,
            )
        except BackendResponseError as e:
            error = translate_error(to_backend_error(e.body, e.status), context)
            logger.info("%s %s -> HTTP %d: %s", route.method, route.url, e.status, error.msg)
            return error
        except TransportError as e:
            logger.warning("Elasticsearch unreachable: %s", e)
            return NormalizedError(msg=str(e))

    async def _check_index_exists(self, index: str) -> Any | NormalizedError:
        """Guard writes against Elasticsearch creating missing indexes on the fly."""
        return await self._send(
            paths.index_exists_route(self._origin, index),
            _SUCCESS,
            _index_context(index),
        )

    async def _check_doc_absent(self, index: str, key: str) -> Any | NormalizedError:
        """A 404 is the only acceptable answer; anything else is a conflict."""
        res = await self._send(
            paths.get_doc_route(self._origin, index, key),
            status_is(404),
            _doc_context(index, key),
        )
        return DOCUMENT_CONFLICT.model_copy() if is_failure(res) else res

    # ── Indexes ──────────────────────────────────────────────────────────

    async def create_index(self, spec: IndexSpec) -> OkResult | NormalizedError:
        mappings = mappings_payload(spec)
        logger.debug("Creating index %s with mappings %s", spec.index, mappings)

        res = await self._send(
            paths.create_index_route(self._origin, spec.index),
            _SUCCESS,
            _index_context(spec.index),
            content=encode(mappings),
        )
        if is_failure(res):
            return res
        return OkResult()

    async def delete_index(self, index: str) -> OkResult | NormalizedError:
        # Exactly 200: unlike documents, a missing index is an error
        res = await self._send(
            paths.delete_index_route(self._origin, index),
            status_is(200),
            _index_context(index),
        )
        if is_failure(res):
            return res
        return OkResult()

    # ── Documents ────────────────────────────────────────────────────────

    async def index_doc(self, index: str, key: str, doc: Document) -> OkResult | NormalizedError:
        body = to_alias(doc)

        checked = await self._check_index_exists(index)
        if is_failure(checked):
            return checked

        absent = await self._check_doc_absent(index, key)
        if is_failure(absent):
            return absent

        res = await self._send(
            paths.index_doc_route(self._origin, index, key),
            _SUCCESS,
            _doc_context(index, key),
            content=encode(body),
        )
        if is_failure(res):
            return res
        return OkResult()

    async def get_doc(self, index: str, key: str) -> DocResult | NormalizedError:
        # 404s for a missing index and a missing document differ only in the body
        res = await self._send(
            paths.get_doc_route(self._origin, index, key),
            _SUCCESS,
            _doc_context(index, key),
        )
        if is_failure(res):
            return res

        source = res.get("_source", res) if isinstance(res, Mapping) else {}
        if not isinstance(source, Mapping):
            source = {}
        return DocResult(key=key, doc=dict(from_alias(source)))

    async def update_doc(self, index: str, key: str, doc: Document) -> OkResult | NormalizedError:
        body = to_alias(doc)

        checked = await self._check_index_exists(index)
        if is_failure(checked):
            return checked

        res = await self._send(
            paths.update_doc_route(self._origin, index, key),
            _SUCCESS,
            _doc_context(index, key),
            content=encode(body),
        )
        if is_failure(res):
            return res
        return OkResult()

    async def remove_doc(self, index: str, key: str) -> OkResult | NormalizedError:
        # Removing what is already gone succeeds
        res = await self._send(
            paths.remove_doc_route(self._origin, index, key),
            lambda r: r.status_code < 400 or r.status_code == 404,
            _doc_context(index, key),
        )
        if is_failure(res):
            return res
        return OkResult()

    # ── Bulk ─────────────────────────────────────────────────────────────

    async def bulk(self, index: str, docs: list[Document]) -> BulkResult | NormalizedError:
        if not all("id" in doc or "_id" in doc for doc in docs):
            return MISSING_ID.model_copy()

        checked = await self._check_index_exists(index)
        if is_failure(checked):
            return checked

        ids = ", ".join(str(bulk_doc_id(doc)) for doc in docs)
        res = await self._send(
            paths.bulk_route(self._origin),
            _SUCCESS,
            ErrorContext(subject=f"docs with ids {ids}", index=f"index {index}"),
            content=bulk_payload(index, docs),
            content_type=NDJSON_CONTENT_TYPE,
        )
        if is_failure(res):
            return res

        items = res.get("items", []) if isinstance(res, Mapping) else []
        return BulkResult(results=[self._bulk_item_result(index, entry) for entry in items])

    @staticmethod
    def _bulk_item_result(index: str, entry: Mapping[str, Any]) -> BulkItemResult:
        """Normalize one ``items[]`` entry of a bulk response.

        Entries are keyed by their action (``{"index": {...}}``); each carries
        either an ``error`` object and a ``status``, or a successful write.
        """
        item = entry.get("index") or next(iter(entry.values()), {})
        item_id = str(item.get("_id", ""))

        if "error" not in item:
            return BulkItemOk(id=item_id)

        backend_error = to_backend_error(
            {"error": item["error"], "status": item.get("status")},
            fallback_status=item.get("status"),
        )
        return translate_error(backend_error, _doc_context(index, item_id))

    # ── Query ────────────────────────────────────────────────────────────

    async def query(self, index: str, q: QuerySpec) -> QueryResult | NormalizedError:
        res = await self._send(
            paths.query_route(self._origin, index),
            _SUCCESS,
            ErrorContext(subject=f"query against index {index}", index=f"index {index}"),
            content=encode(query_payload(q)),
        )
        if is_failure(res):
            return res

        hits = res.get("hits", {}).get("hits", []) if isinstance(res, Mapping) else []
        return QueryResult(matches=[_hit_source(hit) for hit in hits])

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check Elasticsearch cluster health."""
        if self._http is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        route = paths.cluster_health_route(self._origin)
        try:
            start = time.monotonic()
            health = await self._http.call(route.method, route.url, _SUCCESS)
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
