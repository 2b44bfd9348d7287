from __future__ import annotations

import argparse
import json
import sys
import uuid
from typing import List, Optional

from supabase_rest.logging_utils import setup_logging
from supabase_rest.registry.capability_registry import CapabilityRegistry


def _load_args(raw: str) -> dict:
    # '@path/to/file.json' reads the step args from a file
    if raw.startswith("@"):
        with open(raw[1:], "r", encoding="utf-8") as f:
            raw = f.read()
    try:
        data = json.loads(raw or "{}")
    except ValueError:
        raise SystemExit("--args must be a JSON object")
    if not isinstance(data, dict):
        raise SystemExit("--args must be a JSON object")
    return data


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Run one Supabase REST step (select/insert/update/delete/query)."
    )
    ap.add_argument("verb", help="e.g. supabase.select")
    ap.add_argument("--args", default="{}", help="JSON object or @file.json")
    ap.add_argument("--correlation-id", default=None)
    opts = ap.parse_args(argv)

    setup_logging()

    reg = CapabilityRegistry()
    meta = {"correlation_id": opts.correlation_id or uuid.uuid4().hex}
    out = reg.dispatch(opts.verb, _load_args(opts.args), meta)
    print(json.dumps(out, indent=2, ensure_ascii=False, default=str))
    return 0 if out.get("ok") else 1


if __name__ == "__main__":
    sys.exit(main())
