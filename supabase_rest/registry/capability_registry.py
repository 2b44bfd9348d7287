from __future__ import annotations

from typing import Any, Callable, Dict, Optional, TypedDict
import logging
import time

import requests

from supabase_rest.errors import ConfigurationError
from supabase_rest.logging_utils import correlation_scope
from supabase_rest.registry.adapters.db_read import db_select_adapter
from supabase_rest.registry.adapters.db_rpc import db_query_adapter
from supabase_rest.registry.adapters.db_write import (
    db_delete_adapter,
    db_insert_adapter,
    db_update_adapter,
)

logger = logging.getLogger("supabase.registry")

ERR_VERSION = 1


def _mk_error(
    code: str, message: str, hint: str | None = None, details: str | dict | None = None
) -> dict:
    err = {
        "version": ERR_VERSION,
        "code": str(code),
        "message": str(message),
        "hint": hint,
        "details": details,
    }
    # Drop empty keys
    return {k: v for k, v in err.items() if v is not None}


def _normalize_exception(exc: Exception) -> dict:
    """
    Map configuration and transport exceptions to a stable {code,message,hint}.
    """
    if isinstance(exc, ConfigurationError):
        return _mk_error("ValidationError", str(exc))
    if isinstance(exc, requests.Timeout):
        return _mk_error(
            "Timeout", str(exc), "Raise SUPABASE_HTTP_TIMEOUT or narrow the request."
        )
    if isinstance(exc, requests.ConnectionError):
        msg = str(exc)
        if "ssl" in msg.lower():
            return _mk_error("TLS", msg)
        return _mk_error("ConnRefused", msg, "Check the Supabase project URL.")
    if isinstance(exc, (ValueError, TypeError)):
        return _mk_error("ValidationError", str(exc))

    # Fallback
    return _mk_error(exc.__class__.__name__, str(exc)[:1000])


class Envelope(TypedDict, total=False):
    ok: bool
    result: Dict[str, Any] | None
    error: Dict[str, Any] | None
    latency_ms: int
    correlation_id: str


Adapter = Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]


class CapabilityRegistry:
    """
    Verb -> adapter table handed to the workflow engine:
        reg = CapabilityRegistry()
        env = reg.dispatch("supabase.select", {"table": "users"}, {"correlation_id": "abc"})
    dispatch never raises; failures come back as ok=False with a structured error.
    """

    def __init__(self) -> None:
        self._adapters: Dict[str, Adapter] = {}
        self._register()

    def register(self, verb: str, fn: Adapter) -> None:
        self._adapters[verb] = fn

    def has(self, verb: str) -> bool:
        return verb in self._adapters

    def verbs(self) -> list[str]:
        return sorted(self._adapters)

    # -----------------------------
    # Central dispatch with envelope
    # -----------------------------
    def dispatch(
        self, verb: str, args: Dict[str, Any], meta: Optional[Dict[str, Any]] = None
    ) -> Envelope:
        t0 = time.perf_counter()
        meta = meta or {}
        correlation_id = meta.get("correlation_id", "")

        handler = self._adapters.get(verb)
        if handler is None:
            return {
                "ok": False,
                "result": None,
                "error": _mk_error("UnknownVerb", f"Unknown verb: {verb}"),
                "latency_ms": int((time.perf_counter() - t0) * 1000),
                "correlation_id": correlation_id,
            }

        with correlation_scope(correlation_id):
            try:
                result = handler(args or {}, meta)
            except Exception as exc:
                latency_ms = int((time.perf_counter() - t0) * 1000)
                norm = _normalize_exception(exc)
                logger.warning(
                    "%s failed after %dms: %s %s",
                    verb,
                    latency_ms,
                    norm["code"],
                    norm["message"],
                )
                return {
                    "ok": False,
                    "result": None,
                    "error": norm,
                    "latency_ms": latency_ms,
                    "correlation_id": correlation_id,
                }

        return {
            "ok": True,
            "result": result,
            "error": None,
            "latency_ms": int((time.perf_counter() - t0) * 1000),
            "correlation_id": correlation_id,
        }

    # -----------------------------
    # Registry
    # -----------------------------
    def _register(self) -> None:
        self.register("supabase.select", db_select_adapter)
        self.register("supabase.insert", db_insert_adapter)
        self.register("supabase.update", db_update_adapter)
        self.register("supabase.delete", db_delete_adapter)
        self.register("supabase.query", db_query_adapter)
