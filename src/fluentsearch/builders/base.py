"""Builder base — Immutable, chainable request values.

Every builder is a frozen pydantic model.  Configuration calls return a new
builder with one field changed (``model_copy``), so a partially configured
builder can be shared and extended without affecting other users of it.
Terminal calls validate what they need synchronously, then hand a request
to ``ConnectionManager.run()`` and return the resulting coroutine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from fluentsearch.config.settings import DocumentSettings
from fluentsearch.core.connection import ConnectionManager


class Builder(BaseModel):
    """Base class for all request builders.

    Attributes:
        connection: Where the engine handle is resolved at terminal-call time.
        type_name: Type label the request is scoped to, if any.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    connection: ConnectionManager = Field(exclude=True, repr=False)
    type_name: str | None = Field(default=None, description="Document type label")

    @property
    def documents(self) -> DocumentSettings:
        return self.connection.settings.documents

    def _with(self, **changes: Any) -> Self:
        return self.model_copy(update=changes)

    def type_filter(self) -> dict[str, Any] | None:
        """Term filter restricting a search to ``type_name``."""
        if not self.type_name:
            return None
        return {"term": {self.documents.type_field: self.type_name}}


class TypedBuilder(Builder):
    """A builder whose type is chosen with ``of_type()``."""

    def of_type(self, type_name: str) -> Self:
        return self._with(type_name=type_name)


def compose_query(query: Any, filters: Iterable[Any]) -> dict[str, Any]:
    """Combine a query with filter clauses into one query body.

    Without filters the query is used untouched (``match_all`` when there is
    none).  With filters both are wrapped in a ``bool`` query.
    """
    clauses = [f for f in filters if f]
    if not clauses:
        return query if query else {"match_all": {}}

    bool_query: dict[str, Any] = {"filter": clauses}
    if query:
        bool_query["must"] = [query]
    return {"bool": bool_query}


def unique_ids(ids: Sequence[Any]) -> list[Any]:
    """Drop repeated ids, keeping the first occurrence of each."""
    return list(dict.fromkeys(ids))


def is_sequence(value: Any) -> bool:
    """True for lists and tuples (not strings or mappings)."""
    return isinstance(value, (list, tuple))


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def has_top_level_filter(query: Any) -> bool:
    return isinstance(query, Mapping) and "filter" in query


async def resolved(value: Any) -> Any:
    """Wrap an already known value in a coroutine."""
    return value
