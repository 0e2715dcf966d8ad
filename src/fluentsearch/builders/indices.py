"""Index administration — Mappings, aliases, templates and indices.

Mappings and alias changes use builders (``store.get_mapping().of_type(t)
.from_index(i)``); lookups that need nothing but a name are plain
functions returning a coroutine.
"""

from __future__ import annotations

from collections.abc import Coroutine, Mapping
from typing import Any

from opensearchpy.exceptions import NotFoundError

from fluentsearch.builders.base import Builder, TypedBuilder
from fluentsearch.core.adapter import pick_index
from fluentsearch.core.connection import ConnectionManager
from fluentsearch.core.exceptions import MissingParameterError

# ── Mappings ─────────────────────────────────────────────────────────────


class GetMapping(TypedBuilder):
    """Read an index mapping, narrowed to a type's fields when one is set."""

    def from_index(self, index: str) -> Coroutine[Any, Any, dict[str, Any]]:
        return self.connection.run(
            lambda client: client.indices.get_mapping(index=index),
            lambda response: self._narrow(response, index),
            operation="get_mapping",
        )

    def _narrow(self, response: Mapping[str, Any], index: str) -> dict[str, Any]:
        key = pick_index(response, index)
        if key is None:
            return {}
        mappings = response[key].get("mappings", {})
        if not self.type_name:
            return mappings

        # typed engines nest properties under the type name
        typed = mappings.get(self.type_name)
        if isinstance(typed, Mapping) and "properties" in typed:
            return typed["properties"]
        return mappings.get("properties", {})


class PutMapping(TypedBuilder):
    """Add field definitions to an index mapping.

    The type's discriminator field is mapped as a ``keyword`` unless the
    mapping already defines it.
    """

    mapping: dict[str, Any]

    def body(self) -> dict[str, Any]:
        mapping = self.mapping
        wrapped = mapping.get(self.type_name) if self.type_name else None
        if len(mapping) == 1 and isinstance(wrapped, Mapping):
            mapping = wrapped

        body = dict(mapping)
        properties = dict(body.get("properties", {}))
        properties.setdefault(self.documents.type_field, {"type": "keyword"})
        body["properties"] = properties
        return body

    def into(self, index: str) -> Coroutine[Any, Any, Any]:
        if not index:
            raise MissingParameterError("An index name must be supplied to put a mapping")
        if not self.type_name:
            raise MissingParameterError("A type must be set with of_type() to put a mapping")

        body = self.body()
        return self.connection.run(
            lambda client: client.indices.put_mapping(index=index, body=body),
            operation="put_mapping",
        )


# ── Aliases ──────────────────────────────────────────────────────────────


class CreateAlias(Builder):
    alias_name: str

    def to(self, index: str) -> Coroutine[Any, Any, Any]:
        return self.connection.run(
            lambda client: client.indices.put_alias(index=index, name=self.alias_name),
            operation="put_alias",
        )

    def for_index(self, index: str) -> Coroutine[Any, Any, Any]:
        return self.to(index)


class DeleteAlias(Builder):
    alias_name: str

    def from_index(self, index: str) -> Coroutine[Any, Any, Any]:
        return self.connection.run(
            lambda client: client.indices.delete_alias(index=index, name=self.alias_name),
            operation="delete_alias",
        )


def get_alias(connection: ConnectionManager, alias_name: str) -> Coroutine[Any, Any, str | None]:
    """Resolve an alias to the index it points to.

    Resolves to ``None`` when the alias does not exist; any other engine
    failure raises ``EngineError``.
    """

    async def _resolve(client: Any) -> str | None:
        try:
            response = await client.indices.get_alias(name=alias_name)
        except NotFoundError:
            return None
        return next(iter(response), None)

    return connection.run(_resolve, operation="get_alias")


def check_alias_exists(connection: ConnectionManager, alias_name: str) -> Coroutine[Any, Any, bool]:
    return connection.run(
        lambda client: client.indices.exists_alias(name=alias_name),
        bool,
        operation="exists_alias",
    )


# ── Templates ────────────────────────────────────────────────────────────


def create_template(connection: ConnectionManager, name: str, template: Any) -> Coroutine[Any, Any, Any]:
    return connection.run(
        lambda client: client.indices.put_template(name=name, body=template),
        operation="put_template",
    )


def delete_template(connection: ConnectionManager, name: str) -> Coroutine[Any, Any, Any]:
    return connection.run(
        lambda client: client.indices.delete_template(name=name),
        operation="delete_template",
    )


def get_template(connection: ConnectionManager, name: str) -> Coroutine[Any, Any, Any]:
    return connection.run(
        lambda client: client.indices.get_template(name=name),
        operation="get_template",
    )


# ── Indices ──────────────────────────────────────────────────────────────


def check_index_exists(connection: ConnectionManager, index: str) -> Coroutine[Any, Any, bool]:
    return connection.run(
        lambda client: client.indices.exists(index=index),
        bool,
        operation="exists",
    )


def create_index(connection: ConnectionManager, index: str, body: Any = None) -> Coroutine[Any, Any, Any]:
    return connection.run(
        lambda client: client.indices.create(index=index, body=body),
        operation="create_index",
    )


def destroy_index(connection: ConnectionManager, index: str) -> Coroutine[Any, Any, Any]:
    return connection.run(
        lambda client: client.indices.delete(index=index),
        operation="delete_index",
    )
