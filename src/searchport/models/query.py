"""Query models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class QuerySpec(BaseModel):
    """A structured full-text query with optional equality filters."""

    query: str = Field(description="Free-text query, matched fuzzily")
    fields: list[str] | None = Field(default=None, description="Fields to match against (None = backend default)")
    filter: dict[str, Any] | None = Field(default=None, description="Exact-match filters, field name to value")
