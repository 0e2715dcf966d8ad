"""fluentsearch — Fluent async access layer for OpenSearch / Elasticsearch.

Quick start::

    from fluentsearch import DocumentStore

    store = DocumentStore()
    store.configure({"url": "http://localhost:9200"})

    doc = await store.get("42").from_index("blog")
    page = await store.query("title:hello").of_type("article").from_index("blog")

The library only logs through ``logging.getLogger(__name__)`` and never
installs handlers itself.  Applications call ``setup_logging(settings.observability)``
once at startup to set up structlog (JSON or console rendering) and a stdout
handler at the configured level for these and the engine client's records.
"""

from fluentsearch.core.connection import ConnectionManager
from fluentsearch.core.exceptions import (
    EngineError,
    FluentSearchError,
    MissingParameterError,
    NotConfiguredError,
    UnsupportedShapeError,
)
from fluentsearch.models.document import ResultEnvelope
from fluentsearch.observability.logging import setup_logging
from fluentsearch.store import DocumentStore

__all__ = [
    "ConnectionManager",
    "DocumentStore",
    "EngineError",
    "FluentSearchError",
    "MissingParameterError",
    "NotConfiguredError",
    "ResultEnvelope",
    "UnsupportedShapeError",
    "setup_logging",
]
