# supabase_rest/registry/http/request.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from supabase_rest.errors import ConfigurationError
from supabase_rest.models.messages import (
    ConnectionConfig,
    DeleteRequest,
    InsertRequest,
    OperationKind,
    QueryRequest,
    SelectRequest,
    UpdateRequest,
)
from supabase_rest.registry.http.headers import base_headers, flatten
from supabase_rest.registry.util.url import (
    normalize_rest_url,
    rpc_endpoint,
    table_endpoint,
    with_query,
)

DEFAULT_RESOLUTION = "merge-duplicates"
RETURN_REPRESENTATION = "return=representation"


@dataclass
class AssembledRequest:
    kind: OperationKind
    method: str
    uri: str
    headers: Dict[str, List[str]] = field(default_factory=dict)
    body: Optional[str] = None

    def wire_headers(self) -> Dict[str, str]:
        return flatten(self.headers)

    def body_bytes(self) -> Optional[bytes]:
        return None if self.body is None else self.body.encode("utf-8")


# (method, endpoint, query segments, Prefer items, body)
_Parts = Tuple[str, str, List[str], List[str], Optional[str]]


def _blank(v: Any) -> bool:
    return v is None or not str(v).strip()


def _require(v: Any, what: str) -> None:
    if _blank(v):
        raise ConfigurationError(f"{what} is required")


def _dumps(obj: Any) -> str:
    # dates, decimals, uuids -> str
    return json.dumps(obj, ensure_ascii=False, default=str)


def _select_parts(req: SelectRequest) -> _Parts:
    _require(req.table, "table")
    segments = [f"select={'*' if _blank(req.select) else req.select}"]
    if not _blank(req.filter):
        segments.append(req.filter)
    if not _blank(req.order):
        segments.append(f"order={req.order}")
    if req.limit is not None:
        segments.append(f"limit={req.limit}")
    if req.offset is not None:
        segments.append(f"offset={req.offset}")
    prefer = [] if _blank(req.count) else [f"count={req.count}"]
    return "GET", table_endpoint(req.table), segments, prefer, None


def _insert_parts(req: InsertRequest) -> _Parts:
    _require(req.table, "table")
    if req.data is None:
        raise ConfigurationError("data (object or array of objects) is required")
    # an empty array is sent as-is; PostgREST answers with no rows
    segments = [f"select={'*' if _blank(req.select) else req.select}"]
    prefer = [RETURN_REPRESENTATION]
    if not _blank(req.on_conflict):
        segments.append(f"on_conflict={req.on_conflict}")
        resolution = DEFAULT_RESOLUTION if _blank(req.resolution) else req.resolution
        prefer.append(f"resolution={resolution}")
    return "POST", table_endpoint(req.table), segments, prefer, _dumps(req.data)


def _update_parts(req: UpdateRequest) -> _Parts:
    _require(req.table, "table")
    if not req.data:
        raise ConfigurationError("data (non-empty object) is required for update")
    # an unfiltered PATCH rewrites every row
    _require(req.filter, "filter")
    segments = [f"select={'*' if _blank(req.select) else req.select}", req.filter]
    return "PATCH", table_endpoint(req.table), segments, [RETURN_REPRESENTATION], _dumps(req.data)


def _delete_parts(req: DeleteRequest) -> _Parts:
    _require(req.table, "table")
    _require(req.filter, "filter")
    select = "*" if req.select is None else req.select
    segments: List[str] = []
    prefer: List[str] = []
    if not _blank(select):
        segments.append(f"select={select}")
        prefer.append(RETURN_REPRESENTATION)
    segments.append(req.filter)
    if not _blank(req.count):
        prefer.append(f"count={req.count}")
    return "DELETE", table_endpoint(req.table), segments, prefer, None


def _query_parts(req: QueryRequest) -> _Parts:
    _require(req.function_name, "function_name")
    body = _dumps(req.parameters) if req.parameters else "{}"
    return "POST", rpc_endpoint(req.function_name), [], [], body


_RULES: Dict[OperationKind, Callable[[Any], _Parts]] = {
    OperationKind.SELECT: _select_parts,
    OperationKind.INSERT: _insert_parts,
    OperationKind.UPDATE: _update_parts,
    OperationKind.DELETE: _delete_parts,
    OperationKind.QUERY: _query_parts,
}


def assemble(kind: OperationKind, config: ConnectionConfig, request: Any) -> AssembledRequest:
    """
    Build method, URI, headers and body for one PostgREST call.
    Raises ConfigurationError for missing url/api key/target/payload, and for
    update/delete without a filter. Nothing is sent from here.
    """
    _require(config.url, "url")
    _require(config.api_key, "api_key")

    method, endpoint, segments, prefer, body = _RULES[kind](request)

    headers = base_headers(config.api_key, config.schema_name or "public")
    if prefer:
        headers["Prefer"] = [",".join(prefer)]

    uri = with_query(normalize_rest_url(config.url) + endpoint, segments)
    return AssembledRequest(kind=kind, method=method, uri=uri, headers=headers, body=body)
