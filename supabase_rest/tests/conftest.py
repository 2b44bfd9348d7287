import json
from unittest.mock import MagicMock

import pytest

from supabase_rest.models.messages import ConnectionConfig
from supabase_rest.registry.http.client import HttpResponse

PROJECT_URL = "https://demo.supabase.co"
API_KEY = "test-key"


def make_transport(status=200, body=b"[]", headers=None):
    """MagicMock transport whose send() returns one canned response."""
    if isinstance(body, (list, dict)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    transport = MagicMock()
    transport.send.return_value = HttpResponse(
        status=status,
        url=PROJECT_URL,
        headers=dict(headers or {"Content-Type": "application/json; charset=utf-8"}),
        body=body,
        elapsed_ms=1,
    )
    return transport


def sent(transport):
    """(method, url, headers, data) of the single request sent."""
    transport.send.assert_called_once()
    return transport.send.call_args.args


@pytest.fixture
def config():
    return ConnectionConfig(url=PROJECT_URL, api_key=API_KEY)
