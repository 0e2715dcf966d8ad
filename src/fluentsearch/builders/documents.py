"""Document builders — Get, GetMany, Post, Put and bulk.

Example::

    doc = await store.get("42").of_type("article").from_index("blog")
    page = await store.get(["1", "2", "2"]).from_index("blog")
    created = await store.post({"title": "Hello"}).of_type("article").into("blog")
    updated = await store.put({"title": "Hi"}).of_type("article").with_id("42").into("blog")
"""

from __future__ import annotations

from collections.abc import Coroutine, Mapping, Sequence
from typing import Any, Self

from pydantic import Field, field_validator

from fluentsearch.builders.base import TypedBuilder, is_sequence, resolved, unique_ids, utc_now_iso
from fluentsearch.core.adapter import adapt_document, adapt_result_set, empty_result_envelope
from fluentsearch.core.connection import ConnectionManager
from fluentsearch.core.exceptions import MissingParameterError, UnsupportedShapeError
from fluentsearch.models.document import Document, ResultEnvelope


class Get(TypedBuilder):
    """Fetch a single document by id."""

    doc_id: Any

    def from_index(self, index: str) -> Coroutine[Any, Any, Document]:
        return self.connection.run(
            lambda client: client.get(index=index, id=self.doc_id),
            adapt_document,
            operation="get",
        )


class GetMany(TypedBuilder):
    """Fetch several documents by id in a single multi-get.

    Repeated ids are requested once.  An empty id list resolves to the
    empty envelope without contacting the engine.
    """

    ids: list[Any] = Field(default_factory=list)

    @field_validator("ids", mode="before")
    @classmethod
    def _as_list(cls, v: Any) -> list[Any]:
        if v is None:
            return []
        if is_sequence(v):
            return list(v)
        return [v]

    def from_index(self, index: str) -> Coroutine[Any, Any, ResultEnvelope]:
        if not self.ids:
            return resolved(empty_result_envelope())

        ids = unique_ids(self.ids)
        return self.connection.run(
            lambda client: client.mget(index=index, body={"ids": ids}),
            _adapt_found_documents,
            operation="mget",
        )


def _adapt_found_documents(response: Mapping[str, Any]) -> ResultEnvelope:
    docs = [doc for doc in response.get("docs", []) if doc.get("found", True)]
    return adapt_result_set(docs, total=len(docs))


class Post(TypedBuilder):
    """Create a document and return it as stored.

    A creation timestamp is added when the document has none, and the
    document is labelled with its type.
    """

    document: dict[str, Any]
    doc_id: Any = None

    @field_validator("document", mode="before")
    @classmethod
    def _single_document(cls, v: Any) -> Any:
        if is_sequence(v):
            raise UnsupportedShapeError("post() takes a single document; use bulk() for several")
        return v

    def with_id(self, doc_id: Any) -> Self:
        return self._with(doc_id=doc_id)

    def into(self, index: str) -> Coroutine[Any, Any, Document]:
        if not self.type_name:
            raise MissingParameterError("A type must be set with of_type() before post()")

        body = self.prepared_body()
        doc_id = self.doc_id if self.doc_id is not None else body.get("id")
        return self.connection.run(
            lambda client: self._create(client, index, body, doc_id),
            adapt_document,
            operation="create",
        )

    def prepared_body(self) -> dict[str, Any]:
        """The document as it will be written."""
        settings = self.documents
        body = dict(self.document)
        if not body.get(settings.created_field):
            body[settings.created_field] = utc_now_iso()
        body[settings.type_field] = self.type_name
        return body

    @staticmethod
    async def _create(client: Any, index: str, body: dict[str, Any], doc_id: Any) -> Any:
        if doc_id is not None:
            response = await client.create(index=index, id=doc_id, body=body)
        else:
            response = await client.index(index=index, body=body, op_type="create")
        # read back so the caller sees what the engine actually stored
        return await client.get(index=index, id=response["_id"])


class Put(TypedBuilder):
    """Update a document by merging it over the stored version.

    Fields the caller sets win; every other stored field is kept.
    """

    document: dict[str, Any]

    def with_id(self, doc_id: Any) -> Self:
        return self._with(document={**self.document, "id": doc_id})

    def into(self, index: str) -> Coroutine[Any, Any, Document]:
        if not self.type_name:
            raise MissingParameterError("A type must be set with of_type() before put()")
        doc_id = self.document.get("id")
        if doc_id is None:
            raise MissingParameterError("An id must be set with with_id() before put()")

        return self.connection.run(
            lambda client: self._merge(client, index, doc_id),
            adapt_document,
            operation="update",
        )

    async def _merge(self, client: Any, index: str, doc_id: Any) -> Any:
        existing = await client.get(index=index, id=doc_id)
        merged = merge_documents(existing.get("_source") or {}, self.document)
        merged[self.documents.updated_field] = utc_now_iso()

        response = await client.update(index=index, id=doc_id, body={"doc": merged})
        return await client.get(index=index, id=response["_id"])


def merge_documents(existing: Mapping[str, Any], submitted: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``submitted`` on ``existing``; keys present in ``submitted`` win."""
    merged = dict(submitted)
    for key, value in existing.items():
        if key not in merged:
            merged[key] = value
    return merged


def bulk(connection: ConnectionManager, actions: Sequence[Any]) -> Coroutine[Any, Any, Any]:
    """Send bulk actions; the engine's response is returned unadapted."""
    return connection.run(lambda client: client.bulk(body=list(actions)), operation="bulk")
