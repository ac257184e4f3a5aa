"""Tests for reserved ``_id`` aliasing."""

from __future__ import annotations

import pytest

from searchport.adapters.elasticsearch.aliasing import (
    UNDERSCORE_ID_ALIAS,
    alias_field,
    alias_fields,
    from_alias,
    to_alias,
)

DOCS_WITH_ID = [
    {"_id": "abc"},
    {"_id": "abc", "title": "The Great Gatsby", "rating": 4},
    {"title": "x", "_id": None, "nested": {"_id": "stays"}},
]


class TestToAlias:
    @pytest.mark.parametrize("doc", DOCS_WITH_ID)
    def test_round_trip(self, doc: dict) -> None:
        aliased = to_alias(doc)
        assert "_id" not in aliased
        assert aliased[UNDERSCORE_ID_ALIAS] == doc["_id"]
        assert from_alias(aliased) == doc

    def test_returns_copy(self) -> None:
        doc = {"_id": "abc", "title": "x"}
        aliased = to_alias(doc)
        assert aliased is not doc
        assert doc == {"_id": "abc", "title": "x"}

    def test_without_underscore_id_is_identity(self) -> None:
        doc = {"id": "abc", "title": "x"}
        assert to_alias(doc) is doc
        assert from_alias(doc) is doc

    def test_idempotent(self) -> None:
        doc = {"_id": "abc", "title": "x"}
        once = to_alias(doc)
        assert to_alias(once) == once

    def test_nested_underscore_id_untouched(self) -> None:
        aliased = to_alias({"_id": 1, "nested": {"_id": 2}})
        assert aliased["nested"] == {"_id": 2}


class TestAliasFields:
    def test_alias_field(self) -> None:
        assert alias_field("_id") == UNDERSCORE_ID_ALIAS
        assert alias_field("title") == "title"
        assert alias_field("id") == "id"

    def test_alias_fields_keeps_order(self) -> None:
        assert alias_fields(["title", "_id", "year"]) == ["title", UNDERSCORE_ID_ALIAS, "year"]
