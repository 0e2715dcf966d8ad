"""Tests for the StringQuery, DslQuery, GetAll and Count builders."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from fluentsearch.builders.search import Count, DslQuery, GetAll, StringQuery
from fluentsearch.core.exceptions import EngineError, MissingParameterError, UnsupportedShapeError
from fluentsearch.store import DocumentStore

# ── Dispatch ─────────────────────────────────────────────────────────────────


class TestQueryDispatch:
    def test_string_goes_to_query_string(self, store: DocumentStore) -> None:
        builder = store.query("title:x")
        assert isinstance(builder, StringQuery)
        assert builder.request("test")["q"] == "title:x"
        assert "body" not in builder.request("test")

    def test_structure_goes_to_dsl(self, store: DocumentStore) -> None:
        builder = store.query({"term": {"title": "x"}})
        assert isinstance(builder, DslQuery)
        request = builder.request("test")
        assert request["body"]["query"] == {"term": {"title": "x"}}
        assert "q" not in request


# ── StringQuery ──────────────────────────────────────────────────────────────


class TestStringQuery:
    def test_defaults(self, store: DocumentStore) -> None:
        request = store.string_query("title:final").request("test")
        assert request == {
            "index": "test",
            "q": "title:final",
            "from_": 0,
            "size": 1_000_000,
            "track_total_hits": True,
        }

    def test_type_is_anded_in(self, store: DocumentStore) -> None:
        request = store.string_query("title:example").of_type("example").request("test")
        assert request["q"] == 'doc_type:"example" AND (title:example)'

    def test_type_quotes_are_escaped(self, store: DocumentStore) -> None:
        request = store.string_query("title:x").of_type('say "hi"\\').request("test")
        assert request["q"] == 'doc_type:"say \\"hi\\"\\\\" AND (title:x)'

    def test_paging_and_sort(self, store: DocumentStore) -> None:
        request = store.string_query("x").with_offset(10).with_size(5).sort_by("title:asc").request("test")
        assert (request["from_"], request["size"], request["sort"]) == (10, 5, "title:asc")

    async def test_from_index_returns_envelope(
        self, store: DocumentStore, engine: AsyncMock, search_response: dict[str, Any]
    ) -> None:
        engine.search.return_value = search_response

        result = await store.string_query("title:example").with_size(2).from_index("test")

        assert result.total == 7
        assert [doc["id"] for doc in result.results] == ["doc_001", "doc_002"]
        assert engine.search.await_args.kwargs["q"] == "title:example"


# ── DslQuery ─────────────────────────────────────────────────────────────────


class TestDslQuery:
    def test_sort_accumulates(self, store: DocumentStore) -> None:
        request = store.dsl_query({"match_all": {}}).sort_by("year", "desc").sort_by("title").request("test")
        assert request["body"]["sort"] == [{"year": {"order": "desc"}}, {"title": {"order": "asc"}}]

    def test_sort_does_not_leak_between_builders(self, store: DocumentStore) -> None:
        base = store.dsl_query({"match_all": {}}).sort_by("year")
        base.sort_by("title")
        assert base.request("test")["body"]["sort"] == [{"year": {"order": "asc"}}]

    def test_filter_and_type_make_bool_query(self, store: DocumentStore) -> None:
        query = {"term": {"title": "final"}}
        terms = {"terms": {"user": ["1234", "1337"]}}
        request = store.dsl_query(query).of_type("example").filter_by(terms).request("test")
        assert request["body"]["query"] == {
            "bool": {
                "filter": [{"term": {"doc_type": "example"}}, terms],
                "must": [query],
            }
        }

    def test_no_query_matches_all(self, store: DocumentStore) -> None:
        assert store.dsl_query(None).request("test")["body"]["query"] == {"match_all": {}}

    def test_paging(self, store: DocumentStore) -> None:
        request = store.dsl_query({"match_all": {}}).with_offset(3).with_size(1).request("test")
        assert (request["from_"], request["size"]) == (3, 1)

    async def test_engine_error(self, store: DocumentStore, engine: AsyncMock) -> None:
        from opensearchpy.exceptions import RequestError

        body = {"error": {"type": "parsing_exception", "reason": "unknown query [nope]"}, "status": 400}
        engine.search.side_effect = RequestError(400, "parsing_exception", body)

        with pytest.raises(EngineError) as exc_info:
            await store.dsl_query({"nope": {}}).from_index("test")

        assert exc_info.value.envelope is body


# ── GetAll ───────────────────────────────────────────────────────────────────


class TestGetAll:
    def test_restricted_to_type(self, store: DocumentStore) -> None:
        request = store.get_all("example").request("test")
        assert request["body"]["query"] == {"bool": {"filter": [{"term": {"doc_type": "example"}}]}}
        assert request["size"] == 1_000
        assert request["from_"] == 0
        assert "sort" not in request

    def test_fields_offset_size(self, store: DocumentStore) -> None:
        request =store.get_all("example").fields("title").with_offset(1).size(1).request("test")
        assert request["body"]["fields"] == ["title"]
        assert request["body"]["_source"] is False
        assert (request["from_"], request["size"]) == (1, 1)

    def test_filter_and_sort(self, store: DocumentStore) -> None:
        flt = {"term": {"type": "lala"}}
        request = store.get_all("example").filter_by(flt).sort_by("title:asc,user:desc").request("test")
        assert request["body"]["query"]["bool"]["filter"][1] == flt
        assert request["sort"] == "title:asc,user:desc"

    def test_missing_type_rejected(self, store: DocumentStore, engine: AsyncMock) -> None:
        with pytest.raises(MissingParameterError):
            store.get_all("").from_index("test")
        engine.search.assert_not_called()

    async def test_selected_fields_results(self, store: DocumentStore, engine: AsyncMock) -> None:
        engine.search.return_value = {
            "hits": {
                "total": {"value": 3, "relation": "eq"},
                "hits": [{"_id": "2", "fields": {"title": ["Another example"]}}],
            }
        }

        result = await store.get_all("example").fields(["title"]).with_offset(1).size(1).from_index("test")

        assert result.total == 3
        assert result.results == [{"title": ["Another example"], "id": "2"}]

    async def test_hit_without_selected_fields_keeps_id(self, store: DocumentStore, engine: AsyncMock) -> None:
        engine.search.return_value = {
            "hits": {
                "total": {"value": 2, "relation": "eq"},
                "hits": [
                    {"_index": "test", "_id": "7", "_score": 1.0},
                    {"_index": "test", "_id": "8", "_score": 1.0, "fields": {"title": ["Final example"]}},
                ],
            }
        }

        result = await store.get_all("example").fields(["title"]).from_index("test")

        assert result.results == [{"id": "7"}, {"title": ["Final example"], "id": "8"}]
        assert result.total == 2


# ── Count ────────────────────────────────────────────────────────────────────


class TestCount:
    async def test_count_returns_integer(self, store: DocumentStore, engine: AsyncMock) -> None:
        engine.count.return_value = {"count": 3, "_shards": {"total": 1}}

        total = await store.count("example").that_match({"match": {"title": "example"}}).from_index("test")

        assert total == 3
        body = engine.count.await_args.kwargs["body"]
        assert body["query"]["bool"]["must"] == [{"match": {"title": "example"}}]
        assert engine.count.await_args.kwargs["index"] == "test"

    def test_top_level_filter_rejected(self, store: DocumentStore, engine: AsyncMock) -> None:
        with pytest.raises(UnsupportedShapeError):
            store.count("example").that_match({"filter": {"term": {"user": "1234"}}})
        with pytest.raises(TypeError):
            store.count("example").that_match({"filter": {}})
        engine.count.assert_not_called()

    def test_without_type_or_index(self, store: DocumentStore) -> None:
        assert store.count().request() == {"body": {"query": {"match_all": {}}}}

    def test_builder_type(self, store: DocumentStore) -> None:
        assert isinstance(store.count("example"), Count)
        assert isinstance(store.get_all("example"), GetAll)
