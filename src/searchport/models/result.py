"""Result models — the only values operations hand back to callers.

Every operation resolves to either a success model (``ok=True``) or a
``NormalizedError`` (``ok=False``). The two are told apart by their type and
their ``ok`` tag, never by which other keys happen to be present, so a
document that itself contains ``ok`` or ``_id`` keys is never mistaken for a
failure.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class NormalizedError(BaseModel):
    """The single error currency surfaced to callers."""

    ok: Literal[False] = False
    status: int = Field(default=500, description="HTTP-style status code")
    msg: str = Field(description="Human readable failure message")


class OkResult(BaseModel):
    """Plain success."""

    ok: Literal[True] = True


class DocResult(OkResult):
    """A retrieved document."""

    key: str
    doc: dict[str, Any]


class BulkItemOk(OkResult):
    """A document written successfully inside a bulk request."""

    id: str


BulkItemResult = BulkItemOk | NormalizedError


class BulkResult(OkResult):
    """Outcome of an accepted bulk request; entries must be inspected one by one."""

    results: list[BulkItemResult] = Field(default_factory=list)


class QueryResult(OkResult):
    """Documents matching a query, in backend order."""

    matches: list[dict[str, Any]] = Field(default_factory=list)


Result = OkResult | NormalizedError
