import pytest

from supabase_rest.errors import ConfigurationError
from supabase_rest.services.supabase_service import (
    connection_from_args,
    connection_from_env,
    operation_args,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE", "SUPABASE_KEY", "SUPABASE_SCHEMA"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_args_win_over_env(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://env.supabase.co")
    clean_env.setenv("SUPABASE_KEY", "env-key")
    cfg = connection_from_args(
        {"url": "https://arg.supabase.co", "apiKey": "arg-key", "schema": "sales"}
    )
    assert cfg.url == "https://arg.supabase.co"
    assert cfg.api_key == "arg-key"
    assert cfg.schema_name == "sales"


def test_env_fallback_prefers_service_role(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://env.supabase.co")
    clean_env.setenv("SUPABASE_KEY", "anon")
    clean_env.setenv("SUPABASE_SERVICE_ROLE", "service")
    cfg = connection_from_env()
    assert cfg.url == "https://env.supabase.co"
    assert cfg.api_key == "service"
    assert cfg.schema_name == "public"


def test_env_schema(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://env.supabase.co")
    clean_env.setenv("SUPABASE_KEY", "anon")
    clean_env.setenv("SUPABASE_SCHEMA", "analytics")
    assert connection_from_env().schema_name == "analytics"


def test_missing_credentials(clean_env):
    with pytest.raises(ConfigurationError):
        connection_from_args({"url": "https://arg.supabase.co"})
    with pytest.raises(ConfigurationError):
        connection_from_env()


def test_operation_args_strips_connection_and_transport_keys():
    args = {
        "url": "u",
        "apiKey": "k",
        "schema": "s",
        "table": "users",
        "filter": "id=eq.1",
        "options": {"timeout": 5},
    }
    assert operation_args(args) == {"table": "users", "filter": "id=eq.1"}
    assert operation_args(None) == {}
