import json
from unittest.mock import patch

import pytest

from conftest import make_transport
from supabase_rest.main import _load_args, main

TRANSPORT = "supabase_rest.registry.adapters.postgrest.HttpTransport"


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"users"'])
def test_load_args_rejects_non_object(raw):
    with pytest.raises(SystemExit, match="JSON object"):
        _load_args(raw)


def test_load_args_from_file(tmp_path):
    path = tmp_path / "step.json"
    path.write_text('{"table": "users"}', encoding="utf-8")
    assert _load_args(f"@{path}") == {"table": "users"}
    assert _load_args("") == {}


def test_main_prints_envelope(capsys):
    fake = make_transport(body=[{"id": 1}])
    args = json.dumps({"url": "https://demo.supabase.co", "apiKey": "k", "table": "users"})
    with patch(TRANSPORT, return_value=fake), patch("supabase_rest.main.setup_logging"):
        code = main(["supabase.select", "--args", args, "--correlation-id", "cli-1"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is True
    assert out["correlation_id"] == "cli-1"
    assert out["result"]["rows"] == [{"id": 1}]


def test_main_unknown_verb_exit_code(capsys):
    with patch("supabase_rest.main.setup_logging"):
        code = main(["supabase.truncate"])
    assert code == 1
    assert json.loads(capsys.readouterr().out)["error"]["code"] == "UnknownVerb"
