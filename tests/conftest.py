"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from fluentsearch.config.settings import Settings
from fluentsearch.core.connection import ConnectionManager
from fluentsearch.store import DocumentStore


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def engine() -> AsyncMock:
    """Stub engine handle; every method (including ``indices.*``) is awaitable."""
    return AsyncMock()


@pytest.fixture
def client_factory(engine: AsyncMock) -> Any:
    calls: list[dict[str, Any]] = []

    def factory(**options: Any) -> AsyncMock:
        calls.append(options)
        return engine

    factory.calls = calls  # type: ignore[attr-defined]
    return factory


@pytest.fixture
def connection(settings: Settings, client_factory: Any) -> ConnectionManager:
    manager = ConnectionManager(settings, client_factory=client_factory)
    manager.configure({"url": "http://search.test:9200"})
    return manager


@pytest.fixture
def store(connection: ConnectionManager) -> DocumentStore:
    return DocumentStore(connection)


@pytest.fixture
def unconfigured_store(settings: Settings, client_factory: Any) -> DocumentStore:
    return DocumentStore(ConnectionManager(settings, client_factory=client_factory))


# ── Raw engine payloads ──────────────────────────────────────────────────


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    """Sample engine hit document."""
    return {
        "_index": "test-docs",
        "_id": "doc_001",
        "_score": 8.5,
        "_source": {
            "title": "Solar Nowcasting with Deep Learning",
            "body": "We propose a novel approach to solar irradiance nowcasting.",
            "doc_type": "example",
        },
    }


@pytest.fixture
def search_response(sample_hit: dict[str, Any]) -> dict[str, Any]:
    second = {
        "_index": "test-docs",
        "_id": "doc_002",
        "_score": 3.1,
        "_source": {"title": "Another example", "user": "1234", "doc_type": "example"},
    }
    return {
        "took": 4,
        "hits": {
            "total": {"value": 7, "relation": "eq"},
            "hits": [sample_hit, second],
        },
    }
