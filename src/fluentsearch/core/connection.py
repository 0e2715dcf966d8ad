"""Connection manager — Owns the engine handle shared by every builder.

The manager is created explicitly and handed to ``DocumentStore`` (and from
there to every builder); there is no module-level client.  Builders never
keep the handle themselves, they ask for it at terminal-call time, so a
``configure()`` call that swaps the handle is picked up by the next request.

``run()`` is the single place where a request is issued and its outcome is
adapted: success values go through the supplied adapter, engine exceptions
become ``EngineError`` carrying the uniform error envelope.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from typing import Any, TypeVar

from opensearchpy import AsyncOpenSearch
from opensearchpy.exceptions import TransportError

from fluentsearch.config.settings import DEFAULT_ENGINE_URL, EngineConfig, Settings
from fluentsearch.core.adapter import error_from_exception
from fluentsearch.core.exceptions import EngineError, NotConfiguredError
from fluentsearch.observability.logging import set_engine_log_level

_T = TypeVar("_T")

ClientFactory = Callable[..., Any]
"""Callable building an engine handle from client keyword options."""

EngineCall = Callable[[Any], Awaitable[Any]]
"""A request against the engine handle, e.g. ``lambda client: client.get(...)``."""

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Holds the engine configuration and the handle built from it.

    Args:
        settings: Settings for document stamping and paging. Loaded from the
            environment if None.
        client_factory: Builds the engine handle from keyword options.
            Defaults to ``opensearchpy.AsyncOpenSearch``; tests inject a
            factory returning a stub.

    Example:
        >>> manager = ConnectionManager()
        >>> manager.configure({"url": "http://localhost:9200", "keepAlive": False})
        >>> client = manager.get_handle()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._client_factory = client_factory or AsyncOpenSearch
        self._config: EngineConfig | None = None
        self._handle: Any = None

    @classmethod
    def from_settings(cls, settings: Settings, client_factory: ClientFactory | None = None) -> ConnectionManager:
        """Create a manager already configured from ``settings.engine``."""
        manager = cls(settings, client_factory=client_factory)
        manager.configure(settings.engine)
        return manager

    # ── Configuration ────────────────────────────────────────────────────

    def configure(self, config: EngineConfig | Mapping[str, Any] | None = None) -> EngineConfig | None:
        """Read or replace the engine configuration.

        Called without an argument, returns the stored configuration (None
        before the first call).  Called with one, stores it and (re)creates
        the engine handle.

        Args:
            config: An ``EngineConfig`` or a mapping with ``url``,
                ``keepAlive``/``keep_alive`` and ``logging`` keys.

        Returns:
            The stored configuration.
        """
        if config is None:
            return self._config

        engine_config = config if isinstance(config, EngineConfig) else EngineConfig.model_validate(config)
        options = self._client_options(engine_config)
        set_engine_log_level(engine_config.logging)

        replacing = self._handle is not None
        self._handle = self._client_factory(**options)
        self._config = engine_config
        logger.info("%s engine handle for %s", "Replaced" if replacing else "Created", options["hosts"][0])
        return engine_config

    @staticmethod
    def _client_options(config: EngineConfig) -> dict[str, Any]:
        options: dict[str, Any] = {"hosts": [config.url or DEFAULT_ENGINE_URL]}
        if config.keep_alive is False:
            options["headers"] = {"connection": "close"}
        return options

    def get_handle(self) -> Any:
        """Return the current engine handle.

        Raises:
            NotConfiguredError: If ``configure()`` was never called.
        """
        if self._handle is None:
            raise NotConfiguredError("The engine is not configured. Call configure() before issuing requests.")
        return self._handle

    async def close(self) -> None:
        """Close the engine handle."""
        if self._handle is not None:
            await self._handle.close()
            self._handle = None

    # ── Request execution ────────────────────────────────────────────────

    def run(
        self,
        call: EngineCall,
        adapt: Callable[[Any], _T] | None = None,
        *,
        operation: str = "request",
    ) -> Coroutine[Any, Any, _T]:
        """Issue ``call`` against the handle and adapt its outcome.

        The handle is resolved now, so a missing configuration raises
        ``NotConfiguredError`` immediately; the request itself only runs
        when the returned coroutine is awaited.

        Args:
            call: Receives the engine handle and returns the request awaitable.
            adapt: Applied to the raw success value. Identity if None.
            operation: Name used in log messages.

        Returns:
            A coroutine resolving to the adapted value.
        """
        handle = self.get_handle()
        return self._execute(handle, call, adapt, operation)

    @staticmethod
    async def _execute(
        handle: Any,
        call: EngineCall,
        adapt: Callable[[Any], Any] | None,
        operation: str,
    ) -> Any:
        logger.debug("Engine %s", operation)
        try:
            raw = await call(handle)
        except TransportError as e:
            logger.warning("Engine %s failed: %s", operation, e)
            status = e.status_code if isinstance(e.status_code, int) else None
            raise EngineError(error_from_exception(e), status_code=status) from e
        return adapt(raw) if adapt else raw
