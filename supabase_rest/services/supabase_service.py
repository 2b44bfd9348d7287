# supabase_rest/services/supabase_service.py
from __future__ import annotations

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv, find_dotenv

from supabase_rest.errors import ConfigurationError
from supabase_rest.models.messages import ConnectionConfig, build_model


# --- Load .env from repo root even when the worker cwd varies ---
# We don't override existing env so container/CI secrets still win.
load_dotenv(find_dotenv(usecwd=True), override=False)

_CONNECTION_KEYS = ("url", "apiKey", "api_key", "schema", "schema_name")
# per-step transport settings, read by the adapters
_STEP_KEYS = _CONNECTION_KEYS + ("options",)


def _env_settings() -> Dict[str, Optional[str]]:
    # Support either key name; service-role preferred
    return {
        "url": os.getenv("SUPABASE_URL"),
        "api_key": os.getenv("SUPABASE_SERVICE_ROLE") or os.getenv("SUPABASE_KEY"),
        "schema_name": os.getenv("SUPABASE_SCHEMA") or None,
    }


def connection_from_args(args: Dict[str, Any] | None) -> ConnectionConfig:
    """
    Build the connection for one step. Explicit step args win; anything
    missing falls back to SUPABASE_URL / SUPABASE_SERVICE_ROLE (or
    SUPABASE_KEY) / SUPABASE_SCHEMA.
    """
    args = args or {}
    env = _env_settings()
    url = args.get("url") or env["url"]
    api_key = args.get("apiKey") or args.get("api_key") or env["api_key"]
    schema = args.get("schema") or args.get("schema_name") or env["schema_name"]

    if not url or not api_key:
        raise ConfigurationError(
            "Supabase credentials missing. Pass url/apiKey or set SUPABASE_URL and "
            "SUPABASE_SERVICE_ROLE (or SUPABASE_KEY) in environment or .env."
        )

    data: Dict[str, Any] = {"url": url, "api_key": api_key}
    if schema:
        data["schema_name"] = schema
    return build_model(ConnectionConfig, data)


def connection_from_env() -> ConnectionConfig:
    return connection_from_args({})


def operation_args(args: Dict[str, Any] | None) -> Dict[str, Any]:
    """Step args minus the connection and transport keys, ready for a request model."""
    return {k: v for k, v in (args or {}).items() if k not in _STEP_KEYS}
