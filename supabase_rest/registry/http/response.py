# supabase_rest/registry/http/response.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from supabase_rest.models.messages import OperationKind, OperationResult
from supabase_rest.registry.http.headers import (
    detect_charset,
    first_value,
    parse_content_range_total,
    to_multi,
)

logger = logging.getLogger("supabase.rest")


# ---- parsed body: Rows | Empty | Unparsed ----


@dataclass(frozen=True)
class Rows:
    rows: List[Dict[str, Any]]


@dataclass(frozen=True)
class Empty:
    raw: Optional[str]


@dataclass(frozen=True)
class Unparsed:
    raw: str
    reason: str


ParsedBody = Union[Rows, Empty, Unparsed]


def decode_body(body: Optional[bytes], headers: Mapping[str, str]) -> Optional[str]:
    if body is None:
        return None
    charset = detect_charset(first_value(headers, "Content-Type")) or "utf-8"
    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        # unknown codec name in the header
        return body.decode("utf-8", errors="replace")


def parse_body(text: Optional[str]) -> ParsedBody:
    """
    Array of objects -> Rows(array); single object -> Rows([object]);
    null/blank -> Empty; anything else -> Unparsed. Never raises.
    """
    if text is None or not text.strip():
        return Empty(text)
    try:
        data = json.loads(text)
    except ValueError as e:
        return Unparsed(text, f"invalid JSON: {e}")

    if isinstance(data, list):
        if all(isinstance(r, dict) for r in data):
            return Rows(data)
        return Unparsed(text, "JSON array contains non-object items")
    if isinstance(data, dict):
        # bare object, e.g. an RPC returning a single composite value
        return Rows([data])
    return Unparsed(text, f"unexpected JSON {type(data).__name__}")


def rows_for(kind: OperationKind, parsed: ParsedBody) -> Optional[List[Dict[str, Any]]]:
    if isinstance(parsed, Rows):
        return parsed.rows
    if isinstance(parsed, Empty):
        return []
    # Unparsed: RPC callers get None and inspect raw_response themselves
    return None if kind is OperationKind.QUERY else []


def _content_range_total(headers: Mapping[str, str]) -> Optional[int]:
    value = first_value(headers, "Content-Range")
    try:
        return parse_content_range_total(value)
    except ValueError as e:
        logger.debug("Could not parse Content-Range header %r: %s", value, e)
        return None


def normalize(
    kind: OperationKind,
    uri: str,
    status: int,
    headers: Mapping[str, str],
    body: Optional[bytes],
) -> OperationResult:
    """
    Turn a raw PostgREST response into an OperationResult. Status codes are
    not interpreted; error payloads are parsed like any other body.
    """
    raw = decode_body(body, headers)
    parsed = parse_body(raw)
    if isinstance(parsed, Unparsed):
        logger.warning("Failed to parse %s response as JSON: %s", kind.value, parsed.reason)

    rows = rows_for(kind, parsed)
    count = len(rows) if rows is not None else 0
    total: Optional[int] = None

    if kind is OperationKind.DELETE:
        # PostgREST reports the affected count here even when rows were not returned
        affected = _content_range_total(headers)
        if affected is not None:
            count = affected
    elif kind is OperationKind.SELECT:
        total = _content_range_total(headers)

    return OperationResult(
        kind=kind,
        uri=uri,
        code=status,
        headers=to_multi(headers),
        rows=rows,
        count=count,
        raw_response=raw,
        total_count=total,
    )
