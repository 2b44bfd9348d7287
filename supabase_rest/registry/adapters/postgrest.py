# supabase_rest/registry/adapters/postgrest.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from supabase_rest.errors import ConfigurationError
from supabase_rest.models.messages import ConnectionConfig, OperationKind, OperationResult
from supabase_rest.registry.http.client import HttpTransport
from supabase_rest.registry.http.headers import redact_headers
from supabase_rest.registry.http.request import assemble
from supabase_rest.registry.http.response import normalize

logger = logging.getLogger("supabase.rest")


def execute(
    kind: OperationKind,
    config: ConnectionConfig,
    request: Any,
    transport: Optional[Any] = None,
) -> OperationResult:
    """
    One PostgREST round-trip: assemble, send once, normalize.
    ConfigurationError is raised before the transport is touched; transport
    errors propagate untouched.
    """
    req = assemble(kind, config, request)
    transport = transport or HttpTransport()

    logger.debug("%s %s headers=%s", req.method, req.uri, redact_headers(req.headers))
    resp = transport.send(req.method, req.uri, req.wire_headers(), req.body_bytes())

    result = normalize(kind, req.uri, resp.status, resp.headers, resp.body)
    logger.info(
        "supabase.%s %s -> %d rows=%d", kind.value, req.method, result.code, result.count
    )
    return result


def log_event(action: str, target: str, kind: OperationKind, meta: dict, extra: dict):
    payload = {
        "action": action,
        "target": target,
        "kind": kind.value,
        "correlation_id": (meta or {}).get("correlation_id"),
        **(extra or {}),
    }
    logger.info("supabase.adapter", extra={"event": payload})


def transport_from_options(options: Optional[Dict[str, Any]]) -> HttpTransport:
    """
    Per-step HTTP settings, e.g. options: {timeout: 10, verify: false}.
    Unset keys keep the transport defaults (SUPABASE_HTTP_TIMEOUT, TLS verification on).
    """
    if options is None:
        return HttpTransport()
    if not isinstance(options, dict):
        raise ConfigurationError("options must be an object")
    timeout = options.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigurationError("options.timeout must be a number of seconds")
    return HttpTransport(timeout=timeout, verify=bool(options.get("verify", True)))


def run_adapter(
    kind: OperationKind,
    target: str,
    handler,
    config: ConnectionConfig,
    request: Any,
    meta: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    transport = transport_from_options(options)
    t0 = time.time()
    result = handler(config, request, transport=transport)
    log_event(
        "success",
        target,
        kind,
        meta,
        {
            "code": result.code,
            "count": result.count,
            "duration_ms": int((time.time() - t0) * 1000),
        },
    )
    return result.as_output()
