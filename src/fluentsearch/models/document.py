"""Document and result models — The uniform shapes returned to callers.

Single-document operations return a plain ``Document`` dict that always
carries an ``id``.  Operations returning zero or more documents wrap them in
a ``ResultEnvelope``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

Document = dict[str, Any]
"""An adapted document: the stored fields plus an injected ``id``."""

ErrorEnvelope = dict[str, Any]
"""Uniform error shape: ``{"error": <engine error or wrapped value>}``."""


class ResultEnvelope(BaseModel):
    """Results of an operation that returns zero or more documents.

    ``results`` holds what came back in this response, which may be fewer
    than ``total`` when a size limit truncated the page.  ``total`` is the
    match count reported by the engine.
    """

    results: list[Any] = Field(default_factory=list, description="Documents (or ids) returned in this response")
    total: int = Field(default=0, description="Total number of matches reported by the engine")
