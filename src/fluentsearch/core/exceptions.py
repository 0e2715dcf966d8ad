"""Exceptions raised by the access layer."""

from __future__ import annotations

from typing import Any


class FluentSearchError(Exception):
    """Base exception for fluentsearch errors."""


class NotConfiguredError(FluentSearchError):
    """Raised when the engine handle is requested before ``configure()``."""


class MissingParameterError(FluentSearchError):
    """Raised when a required chained value (type, id, index) was never set."""


class UnsupportedShapeError(FluentSearchError, TypeError):
    """Raised when an argument has a shape the operation cannot accept."""


class EngineError(FluentSearchError):
    """Raised when the search engine reports a failure.

    The raw engine error is always available in envelope form, so callers
    can rely on ``exc.envelope["error"]`` (or ``exc.error``) being present.

    Attributes:
        envelope: The uniform ``{"error": ...}`` error envelope.
        status_code: HTTP status reported by the engine, when known.
    """

    def __init__(self, envelope: dict[str, Any], status_code: int | None = None) -> None:
        self.envelope = envelope
        self.status_code = status_code
        super().__init__(self._describe(envelope))

    @property
    def error(self) -> Any:
        return self.envelope["error"]

    @staticmethod
    def _describe(envelope: dict[str, Any]) -> str:
        error = envelope.get("error")
        if isinstance(error, dict):
            reason = error.get("reason") or error.get("type")
            if reason:
                return str(reason)
        return str(error)
