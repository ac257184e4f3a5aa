"""Reserved ``_id`` field aliasing.

Elasticsearch refuses documents containing ``_id``: it is a metadata field
and cannot be added inside a document. Documents carrying one have the entry
moved to ``UNDERSCORE_ID_ALIAS`` before they are sent, and moved back when
they are read, so the caller's value round-trips untouched.

Renaming is driven purely by key presence, which makes both directions
idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

UNDERSCORE_ID = "_id"
UNDERSCORE_ID_ALIAS = "__movedUnderscoreId63__"


def _rename(doc: Mapping[str, Any], old: str, new: str) -> dict[str, Any]:
    renamed = {k: v for k, v in doc.items() if k != old}
    renamed[new] = doc[old]
    return renamed


def to_alias(doc: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a copy of ``doc`` with ``_id`` moved to the alias, or ``doc`` itself."""
    if UNDERSCORE_ID in doc:
        return _rename(doc, UNDERSCORE_ID, UNDERSCORE_ID_ALIAS)
    return doc


def from_alias(doc: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a copy of ``doc`` with the alias moved back to ``_id``, or ``doc`` itself."""
    if UNDERSCORE_ID_ALIAS in doc:
        return _rename(doc, UNDERSCORE_ID_ALIAS, UNDERSCORE_ID)
    return doc


def alias_field(name: str) -> str:
    """Map a field name referring to ``_id`` onto the alias."""
    return UNDERSCORE_ID_ALIAS if name == UNDERSCORE_ID else name


def alias_fields(names: Iterable[str]) -> list[str]:
    return [alias_field(name) for name in names]
