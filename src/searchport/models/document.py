"""Document and index models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

Document = dict[str, Any]
"""An open mapping of field name to value. Owned by the caller, never mutated in place."""


class IndexSpec(BaseModel):
    """Description of an index to create."""

    index: str = Field(description="Index name", min_length=1)
    fields: list[str] = Field(default_factory=list, description="Fields mapped as full-text")
