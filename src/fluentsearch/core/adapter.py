"""Result adapter — Normalizes raw engine payloads into the uniform shapes.

Every response leaving the access layer passes through here:
  1. Documents (hits, ``get`` responses, ``mget`` docs) become plain dicts
     that always expose an ``id``.
  2. Hit lists become a ``ResultEnvelope``.
  3. Engine errors become an ``{"error": ...}`` envelope.

All functions are pure and never mutate their input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fluentsearch.models.document import Document, ErrorEnvelope, ResultEnvelope


def adapt_document(raw: Any) -> Document | Any:
    """Map an engine document to ``{..fields, id}``.

    The payload is taken from ``fields`` (a stored-fields selection) or
    ``_source`` (the full body).  Its own ``id`` wins; otherwise the hit's
    explicit ``id`` or the engine-assigned ``_id`` is used.  Values without
    either payload are passed through unchanged.
    """
    if not isinstance(raw, Mapping):
        return raw

    payload = raw.get("fields")
    if payload is None:
        payload = raw.get("_source")
    if not isinstance(payload, Mapping):
        return raw

    document = dict(payload)
    document["id"] = _first_present(payload.get("id"), raw.get("id"), raw.get("_id"))
    return document


def _first_present(*candidates: Any) -> Any:
    # 0 and "" are valid ids; only a missing value falls through
    return next((c for c in candidates if c is not None), None)


def adapt_result_set(raw_hits: Iterable[Any], total: int = 0) -> ResultEnvelope:
    """Adapt a sequence of hits into a ``ResultEnvelope``.

    Args:
        raw_hits: Raw engine hits or documents.
        total: Match count to attach (the caller knows where it comes from).
    """
    return ResultEnvelope(results=[adapt_document(hit) for hit in raw_hits], total=total)


def adapt_error(raw_error: Any) -> ErrorEnvelope:
    """Wrap an engine error in the uniform envelope.

    A mapping that already carries an ``error`` key is returned as-is.
    """
    if isinstance(raw_error, Mapping) and raw_error.get("error") is not None:
        return raw_error  # type: ignore[return-value]
    return {"error": raw_error}


def error_from_exception(exc: Exception) -> ErrorEnvelope:
    """Build the error envelope for an exception raised by the engine client.

    ``opensearchpy`` transport errors keep the decoded response body in
    ``info``; that body is the engine-reported error when it is JSON.
    """
    info = getattr(exc, "info", None)
    if isinstance(info, Mapping):
        return adapt_error(info)
    return adapt_error(exc)


def empty_result_envelope() -> ResultEnvelope:
    return ResultEnvelope(results=[], total=0)


def hits_total(hits: Mapping[str, Any]) -> int:
    """Read the match count from a ``hits`` section.

    Newer engines report ``{"value": n, "relation": "eq"}``, older ones a
    bare integer.
    """
    total = hits.get("total", 0)
    if isinstance(total, Mapping):
        return int(total.get("value", 0))
    return int(total or 0)


def adapt_search_response(response: Mapping[str, Any]) -> ResultEnvelope:
    """Adapt a full ``search`` response into a ``ResultEnvelope``."""
    hits = response.get("hits", {})
    return adapt_result_set(hits.get("hits", []), total=hits_total(hits))


def pick_index(response: Mapping[str, Any], index_name: str | None) -> str | None:
    """Choose which per-index entry of a response belongs to ``index_name``.

    An exact name match wins.  Otherwise ``index_name`` is assumed to be an
    alias and the first reported index is used; with several indices behind
    one alias this is best-effort.
    """
    if index_name in response:
        return index_name
    return next(iter(response), None)
