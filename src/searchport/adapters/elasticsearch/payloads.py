"""Request bodies — Index mappings, bulk NDJSON and the query DSL."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from searchport.adapters.elasticsearch.aliasing import alias_field, alias_fields, to_alias
from searchport.models.document import IndexSpec
from searchport.models.query import QuerySpec


def encode(value: Any) -> str:
    """Compact JSON, one line per value."""
    return json.dumps(value, separators=(",", ":"))


def mappings_payload(spec: IndexSpec | None) -> dict[str, Any]:
    """Map every field as ``text``.

    ``_id`` is mapped automatically by Elasticsearch and rejected when
    declared, so it is declared under its alias.
    """
    fields = spec.fields if spec is not None else []
    properties = {field: {"type": "text"} for field in fields}
    return {"mappings": {"properties": dict(to_alias(properties))}}


def bulk_doc_id(doc: Mapping[str, Any]) -> Any:
    """The id a document is written under: ``_id`` when set, else ``id``."""
    return doc.get("_id") or doc.get("id")


def bulk_action(index: str, doc: Mapping[str, Any]) -> dict[str, Any]:
    return {"index": {"_index": index, "_id": bulk_doc_id(doc)}}


def bulk_payload(index: str, docs: Iterable[Mapping[str, Any]]) -> str:
    """Build an ``_bulk`` index payload.

    Two lines per document, an action line then the aliased document, each
    JSON-encoded on its own. The payload must end with a newline.

    See https://www.elastic.co/guide/en/elasticsearch/reference/current/docs-bulk.html
    """
    lines: list[str] = []
    for doc in docs:
        lines.append(encode(bulk_action(index, doc)))
        lines.append(encode(to_alias(doc)))
    return "\n".join(lines) + "\n"


def query_payload(q: QuerySpec) -> dict[str, Any]:
    """Build a bool query: a fuzzy multi-field match plus one term filter per entry.

    Fuzziness is ``AUTO``, scaled by term length on the backend. Any
    reference to ``_id`` in the fields or filter keys targets the alias.
    """
    multi_match: dict[str, Any] = {"query": q.query, "fuzziness": "AUTO"}
    if q.fields is not None:
        multi_match["fields"] = alias_fields(q.fields)

    filters = [{"term": {alias_field(key): value}} for key, value in (q.filter or {}).items()]

    return {
        "query": {
            "bool": {
                "must": {"multi_match": multi_match},
                "filter": filters,
            }
        }
    }
