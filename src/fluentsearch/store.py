"""Document store — Entry points for every operation.

``DocumentStore`` is what application code talks to.  It owns nothing but a
``ConnectionManager`` and hands it to each builder it creates:

    store = DocumentStore()
    store.configure({"url": "http://localhost:9200"})

    page = await store.query("title:solar").of_type("paper").with_size(10).from_index("docs")
    page = await store.query({"match": {"title": "solar"}}).sort_by("year", "desc").from_index("docs")
    await store.delete("doc-1").from_index("docs")
    n = await store.count("paper").that_match({"term": {"lang": "en"}}).from_index("docs")

``query()``, ``delete()`` and ``get()`` choose a builder from the shape of
their argument; every other entry point maps to exactly one builder or
engine call.
"""

from __future__ import annotations

from collections.abc import Coroutine, Mapping, Sequence
from typing import Any

from fluentsearch.builders import documents, indices
from fluentsearch.builders.base import is_sequence
from fluentsearch.builders.delete import DeleteById, DeleteByQuery
from fluentsearch.builders.documents import Get, GetMany, Post, Put
from fluentsearch.builders.indices import CreateAlias, DeleteAlias, GetMapping, PutMapping
from fluentsearch.builders.search import Count, DslQuery, GetAll, StringQuery
from fluentsearch.config.settings import EngineConfig
from fluentsearch.core.connection import ConnectionManager


class DocumentStore:
    """Fluent access to a search engine's documents, mappings and aliases.

    Args:
        connection: The connection manager to issue requests through. A new,
            unconfigured one is created if None.
    """

    def __init__(self, connection: ConnectionManager | None = None) -> None:
        self.connection = connection or ConnectionManager()

    # ── Connection ───────────────────────────────────────────────────────

    def configure(self, config: EngineConfig | Mapping[str, Any] | None = None) -> EngineConfig | None:
        """Read or replace the engine configuration (see ``ConnectionManager.configure``)."""
        return self.connection.configure(config)

    @property
    def client(self) -> Any:
        """The current engine handle, for diagnostics and test stubbing."""
        return self.connection.get_handle()

    async def close(self) -> None:
        await self.connection.close()

    # ── Documents ────────────────────────────────────────────────────────

    def get(self, doc_id: Any) -> Get | GetMany:
        if is_sequence(doc_id):
            return self.get_many(doc_id)
        return Get(connection=self.connection, doc_id=doc_id)

    def get_many(self, ids: Sequence[Any] | None = None) -> GetMany:
        return GetMany(connection=self.connection, ids=ids)

    def post(self, document: Mapping[str, Any]) -> Post:
        return Post(connection=self.connection, document=document)

    def put(self, document: Mapping[str, Any]) -> Put:
        return Put(connection=self.connection, document=document)

    def bulk(self, actions: Sequence[Any]) -> Coroutine[Any, Any, Any]:
        return documents.bulk(self.connection, actions)

    # ── Search ───────────────────────────────────────────────────────────

    def query(self, query: Any) -> StringQuery | DslQuery:
        """String queries use the query-string syntax, anything else the DSL."""
        if isinstance(query, str):
            return self.string_query(query)
        return self.dsl_query(query)

    def string_query(self, text: str) -> StringQuery:
        return StringQuery(connection=self.connection, text=text)

    def dsl_query(self, query: Any) -> DslQuery:
        return DslQuery(connection=self.connection, query=query)

    def get_all(self, type_name: str) -> GetAll:
        return GetAll(connection=self.connection, type_name=type_name)

    def count(self, type_name: str | None = None) -> Count:
        return Count(connection=self.connection, type_name=type_name)

    # ── Deletion ─────────────────────────────────────────────────────────

    def delete(self, target: Any) -> DeleteById | DeleteByQuery:
        """A string is a document id, anything else a query."""
        if isinstance(target, str):
            return self.delete_by_id(target)
        return self.delete_by_query(target)

    def delete_by_id(self, doc_id: Any) -> DeleteById:
        return DeleteById(connection=self.connection, doc_id=doc_id)

    def delete_by_query(self, query: Any) -> DeleteByQuery:
        return DeleteByQuery(connection=self.connection, query=query)

    # ── Mappings ─────────────────────────────────────────────────────────

    def get_mapping(self) -> GetMapping:
        return GetMapping(connection=self.connection)

    def put_mapping(self, mapping: Mapping[str, Any]) -> PutMapping:
        return PutMapping(connection=self.connection, mapping=mapping)

    # ── Aliases ──────────────────────────────────────────────────────────

    def create_alias(self, alias_name: str) -> CreateAlias:
        return CreateAlias(connection=self.connection, alias_name=alias_name)

    def delete_alias(self, alias_name: str) -> DeleteAlias:
        return DeleteAlias(connection=self.connection, alias_name=alias_name)

    def get_alias(self, alias_name: str) -> Coroutine[Any, Any, str | None]:
        return indices.get_alias(self.connection, alias_name)

    def check_alias_exists(self, alias_name: str) -> Coroutine[Any, Any, bool]:
        return indices.check_alias_exists(self.connection, alias_name)

    # ── Templates ────────────────────────────────────────────────────────

    def create_template(self, name: str, template: Any) -> Coroutine[Any, Any, Any]:
        return indices.create_template(self.connection, name, template)

    def delete_template(self, name: str) -> Coroutine[Any, Any, Any]:
        return indices.delete_template(self.connection, name)

    def get_template(self, name: str) -> Coroutine[Any, Any, Any]:
        return indices.get_template(self.connection, name)

    # ── Indices ──────────────────────────────────────────────────────────

    def check_index_exists(self, index: str) -> Coroutine[Any, Any, bool]:
        return indices.check_index_exists(self.connection, index)

    def create_index(self, index: str, body: Any = None) -> Coroutine[Any, Any, Any]:
        return indices.create_index(self.connection, index, body)

    def destroy_index(self, index: str) -> Coroutine[Any, Any, Any]:
        return indices.destroy_index(self.connection, index)
