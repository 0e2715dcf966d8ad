"""Delete builders — By id, or by query."""

from __future__ import annotations

from collections.abc import Coroutine, Mapping
from typing import Any

from opensearchpy.exceptions import NotFoundError

from fluentsearch.builders.base import TypedBuilder, compose_query
from fluentsearch.core.adapter import pick_index
from fluentsearch.core.exceptions import MissingParameterError
from fluentsearch.models.document import ResultEnvelope


class DeleteById(TypedBuilder):
    """Delete one document.

    Resolves to ``results=[id], total=1`` when the document existed and
    ``results=[], total=0`` when it did not.  A missing index is an error.
    """

    doc_id: Any

    def from_index(self, index: str) -> Coroutine[Any, Any, ResultEnvelope]:
        return self.connection.run(
            lambda client: self._delete(client, index),
            self._adapt,
            operation="delete",
        )

    async def _delete(self, client: Any, index: str) -> Any:
        try:
            return await client.delete(index=index, id=self.doc_id)
        except NotFoundError as e:
            # a missing document answers 404 with result=not_found, a missing index does not
            if isinstance(e.info, Mapping) and e.info.get("result") == "not_found":
                return e.info
            raise

    def _adapt(self, response: Mapping[str, Any]) -> ResultEnvelope:
        found = response.get("result") == "deleted" or response.get("found") is True
        if not found:
            return ResultEnvelope(results=[], total=0)
        return ResultEnvelope(results=[response.get("_id", self.doc_id)], total=1)


class DeleteByQuery(TypedBuilder):
    """Delete every document matching a query.

    Engines that report per-index outcomes (``_indices``) resolve to the
    ``_shards`` outcome of the index named in ``from_index``; when that
    name is an alias the first reported index is used, which is only a
    best guess if the alias spans several indices.  Engines reporting a
    single summary resolve to that summary.

    An empty query is rejected rather than widened to ``match_all``.
    """

    query: Any = None

    def request(self, index: str) -> dict[str, Any]:
        if not self.query:
            raise MissingParameterError(
                'A query must be supplied to delete by query; use {"match_all": {}} to delete all'
            )
        return {
            "index": index,
            "body": {"query": compose_query(self.query, [self.type_filter()])},
        }

    def from_index(self, index: str) -> Coroutine[Any, Any, Any]:
        request = self.request(index)
        return self.connection.run(
            lambda client: client.delete_by_query(**request),
            lambda response: shard_outcome(response, index),
            operation="delete_by_query",
        )


def shard_outcome(response: Mapping[str, Any], index: str) -> Any:
    indices = response.get("_indices")
    if not indices:
        return response
    return indices[pick_index(indices, index)]["_shards"]
