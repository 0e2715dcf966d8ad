"""Integration test fixtures — A live OpenSearch (or Elasticsearch) engine with seed data.

Expects an engine to be reachable at ``FLUENTSEARCH_TEST_ENGINE_URL``
(default ``http://localhost:9200``), for example:
    docker run -d -p 9200:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Tests are skipped when no engine answers.  Every test gets a freshly seeded
index which is removed afterwards.
"""

from __future__ import annotations

import os
import time
import uuid
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from fluentsearch.config.settings import Settings
from fluentsearch.core.connection import ConnectionManager
from fluentsearch.store import DocumentStore

ENGINE_URL = os.environ.get("FLUENTSEARCH_TEST_ENGINE_URL", "http://localhost:9200")

TEST_TYPE = "example"

SEED_DOCUMENTS: list[dict[str, Any]] = [
    {"id": "1", "title": "This is an example", "body": "It has a title and body"},
    {"id": "2", "title": "Another example", "user": "1234", "type": "lala"},
    {"id": "3", "title": "Final example", "body": "Broad shoulders and narrow waist", "user": "1337"},
]

SEED_MAPPING = {
    "mappings": {
        "properties": {
            "title": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
            "body": {"type": "text"},
            "user": {"type": "keyword"},
            "type": {"type": "keyword"},
            "doc_type": {"type": "keyword"},
            "createdAt": {"type": "date"},
            "updatedAt": {"type": "date"},
        }
    }
}


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed_index(host: str, index: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        resp = await client.put(f"/{index}", json=SEED_MAPPING)
        resp.raise_for_status()

        for doc in SEED_DOCUMENTS:
            source = {k: v for k, v in doc.items() if k != "id"}
            source["doc_type"] = TEST_TYPE
            resp = await client.put(f"/{index}/_doc/{doc['id']}", json=source)
            resp.raise_for_status()

        # Refresh to make searchable
        await client.post(f"/{index}/_refresh")


async def _drop_index(host: str, index: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{index}", params={"ignore_unavailable": "true"})


@pytest.fixture(scope="session")
def engine_url() -> str:
    """Ensure the engine is running."""
    if not _wait_for_service(ENGINE_URL):
        pytest.skip(f"Search engine not available at {ENGINE_URL}")
    return ENGINE_URL


@pytest.fixture
async def seeded_index(engine_url: str) -> AsyncIterator[str]:
    index = f"fluentsearch-test-{uuid.uuid4().hex[:8]}"
    await _seed_index(engine_url, index)
    yield index
    await _drop_index(engine_url, index)


@pytest.fixture
async def live_store(engine_url: str) -> AsyncIterator[DocumentStore]:
    connection = ConnectionManager(Settings(_env_file=None))  # type: ignore[call-arg]
    store = DocumentStore(connection)
    store.configure({"url": engine_url, "keepAlive": False})
    yield store
    await store.close()
