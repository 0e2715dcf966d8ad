"""Search builders — String queries, DSL queries, get_all and count.

Each builder exposes ``request(index)``, the keyword arguments it will pass
to the engine client, so the request shape can be inspected without
issuing it.
"""

from __future__ import annotations

from collections.abc import Coroutine, Mapping
from typing import Any, Self

from pydantic import Field

from fluentsearch.builders.base import Builder, TypedBuilder, compose_query, has_top_level_filter
from fluentsearch.core.adapter import adapt_result_set, adapt_search_response, hits_total
from fluentsearch.core.exceptions import MissingParameterError, UnsupportedShapeError
from fluentsearch.models.document import ResultEnvelope


def quote_phrase(value: str) -> str:
    """Quote ``value`` as a query-string phrase, escaping ``\\`` and ``"``."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class _SearchBuilder(Builder):
    offset: int = 0
    page_size: int | None = None

    def with_offset(self, offset: int) -> Self:
        return self._with(offset=offset)

    def _search(self, request: dict[str, Any]) -> Coroutine[Any, Any, ResultEnvelope]:
        return self.connection.run(
            lambda client: client.search(**request),
            adapt_search_response,
            operation="search",
        )


class StringQuery(_SearchBuilder, TypedBuilder):
    """Search with the engine's query-string syntax (``q=title:foo``)."""

    text: str
    sort: str | list[str] | None = None

    def sort_by(self, sort: str | list[str]) -> Self:
        """Sort by ``"field:direction"`` pairs (comma-separated string or list)."""
        return self._with(sort=sort)

    def with_size(self, size: int) -> Self:
        return self._with(page_size=size)

    def request(self, index: str) -> dict[str, Any]:
        q = self.text
        if self.type_name:
            q = f"{self.documents.type_field}:{quote_phrase(self.type_name)} AND ({self.text})"

        request: dict[str, Any] = {
            "index": index,
            "q": q,
            "from_": self.offset,
            "size": self.documents.query_size if self.page_size is None else self.page_size,
            "track_total_hits": True,
        }
        if self.sort:
            request["sort"] = self.sort
        return request

    def from_index(self, index: str) -> Coroutine[Any, Any, ResultEnvelope]:
        return self._search(self.request(index))


class DslQuery(_SearchBuilder, TypedBuilder):
    """Search with a structured query body.

    ``sort_by`` calls accumulate: each adds one more sort key.
    """

    query: Any = None
    filter_clause: Any = None
    sort: list[dict[str, Any]] = Field(default_factory=list)

    def filter_by(self, filter_clause: Any) -> Self:
        return self._with(filter_clause=filter_clause)

    def sort_by(self, field: str, direction: str = "asc") -> Self:
        return self._with(sort=[*self.sort, {field: {"order": direction}}])

    def with_size(self, size: int) -> Self:
        return self._with(page_size=size)

    def request(self, index: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "query": compose_query(self.query, [self.type_filter(), self.filter_clause]),
            "track_total_hits": True,
        }
        if self.sort:
            body["sort"] = list(self.sort)

        return {
            "index": index,
            "from_": self.offset,
            "size": self.documents.query_size if self.page_size is None else self.page_size,
            "body": body,
        }

    def from_index(self, index: str) -> Coroutine[Any, Any, ResultEnvelope]:
        return self._search(self.request(index))


class GetAll(_SearchBuilder):
    """List every document of one type, optionally filtered and paged."""

    field_list: list[str] | None = None
    filter_clause: Any = None
    sort: str | None = None

    def fields(self, fields: str | list[str]) -> Self:
        """Return only these stored fields (values come back as lists)."""
        return self._with(field_list=[fields] if isinstance(fields, str) else list(fields))

    def size(self, size: int) -> Self:
        return self._with(page_size=size)

    def filter_by(self, filter_clause: Any) -> Self:
        return self._with(filter_clause=filter_clause)

    def sort_by(self, sort: str) -> Self:
        """Sort by a comma-separated list of ``field:direction`` pairs."""
        return self._with(sort=sort)

    def request(self, index: str) -> dict[str, Any]:
        if not self.type_name:
            raise MissingParameterError("A type must be supplied to get_all()")

        body: dict[str, Any] = {
            "query": compose_query(None, [self.type_filter(), self.filter_clause]),
            "track_total_hits": True,
        }
        if self.field_list:
            body["fields"] = list(self.field_list)
            body["_source"] = False

        request: dict[str, Any] = {
            "index": index,
            "from_": self.offset,
            "size": self.documents.list_size if self.page_size is None else self.page_size,
            "body": body,
        }
        if self.sort:
            request["sort"] = self.sort
        return request

    def from_index(self, index: str) -> Coroutine[Any, Any, ResultEnvelope]:
        request = self.request(index)
        if not self.field_list:
            return self._search(request)
        return self.connection.run(
            lambda client: client.search(**request),
            _adapt_field_selection,
            operation="search",
        )


def _adapt_field_selection(response: Mapping[str, Any]) -> ResultEnvelope:
    # hits holding none of the selected fields come back without a fields payload
    hits = response.get("hits", {})
    selected = [{**hit, "fields": hit.get("fields") or {}} for hit in hits.get("hits", [])]
    return adapt_result_set(selected, total=hits_total(hits))


class Count(Builder):
    """Count the documents of a type matching a query.

    Only a query is accepted; filters must be embedded in it (e.g. in a
    ``bool`` query), a top-level ``filter`` key is rejected.
    """

    query: Any = None

    def that_match(self, query: Any) -> Self:
        if has_top_level_filter(query):
            raise UnsupportedShapeError("count() takes a query only; embed filters in a bool query")
        return self._with(query=query)

    def request(self, index: str | None = None) -> dict[str, Any]:
        request: dict[str, Any] = {"body": {"query": compose_query(self.query, [self.type_filter()])}}
        if index:
            request["index"] = index
        return request

    def from_index(self, index: str | None = None) -> Coroutine[Any, Any, int]:
        request = self.request(index)
        return self.connection.run(
            lambda client: client.count(**request),
            lambda response: int(response["count"]),
            operation="count",
        )
