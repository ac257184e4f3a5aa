"""Base search port adapter — Abstract interface for document-store backends.

Every backend implements this contract. The adapter is responsible for:
  1. Managing indexes (create, delete)
  2. Writing, reading and removing single documents
  3. Writing many documents in one batch
  4. Running structured full-text queries
  5. Reporting health status

All operations resolve to a result model from ``searchport.models.result``.
Backend failures come back as ``NormalizedError`` values rather than being
raised, so callers only ever branch on ``ok``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from searchport.models.document import Document, IndexSpec
from searchport.models.query import QuerySpec
from searchport.models.result import BulkResult, DocResult, NormalizedError, OkResult, QueryResult


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchPortAdapter(ABC):
    """Abstract base class for search port adapters.

    Adapters are stateless between calls apart from their HTTP connection
    pool. Multi-step operations issue their backend calls strictly in
    sequence and never retry.
    """

    port = "search"

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'elasticsearch')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections. Called once before the first operation."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close connections and release resources."""

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the backend."""

    @abstractmethod
    async def create_index(self, spec: IndexSpec) -> OkResult | NormalizedError:
        """Create an index whose fields are mapped as full-text."""

    @abstractmethod
    async def delete_index(self, index: str) -> OkResult | NormalizedError:
        """Delete an index. A missing index is a failure."""

    @abstractmethod
    async def index_doc(self, index: str, key: str, doc: Document) -> OkResult | NormalizedError:
        """Store a new document under ``key``, failing if one already exists."""

    @abstractmethod
    async def get_doc(self, index: str, key: str) -> DocResult | NormalizedError:
        """Retrieve the document stored under ``key``."""

    @abstractmethod
    async def update_doc(self, index: str, key: str, doc: Document) -> OkResult | NormalizedError:
        """Replace the document stored under ``key``."""

    @abstractmethod
    async def remove_doc(self, index: str, key: str) -> OkResult | NormalizedError:
        """Remove the document stored under ``key``. A missing document is a success."""

    @abstractmethod
    async def bulk(self, index: str, docs: list[Document]) -> BulkResult | NormalizedError:
        """Write many documents in one request and report per-document outcomes."""

    @abstractmethod
    async def query(self, index: str, q: QuerySpec) -> QueryResult | NormalizedError:
        """Run a full-text query with optional equality filters."""
