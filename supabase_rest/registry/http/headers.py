import re
from typing import Dict, List, Mapping, Optional

DEFAULT_SCHEMA = "public"

_CONTENT_RANGE_RE = re.compile(r"^\s*([^/\s]+)/([^/\s]+)\s*$")

_REDACT = {"apikey", "authorization"}


def base_headers(api_key: str, schema: str = DEFAULT_SCHEMA) -> Dict[str, List[str]]:
    """
    Headers sent with every PostgREST call. Values are lists so a header can
    carry more than one value when the request is assembled.
    """
    hdrs: Dict[str, List[str]] = {
        "apikey": [api_key],
        "Authorization": [f"Bearer {api_key}"],
        "Content-Type": ["application/json"],
        "Accept": ["application/json"],
    }
    # Non-default schemas are selected through profile headers
    if schema and schema != DEFAULT_SCHEMA:
        hdrs["Accept-Profile"] = [schema]
        hdrs["Content-Profile"] = [schema]
    return hdrs


def detect_charset(content_type: str | None) -> str | None:
    """
    Best-effort charset detection from Content-Type header.
    Returns codec name (e.g., 'utf-8') or None if not given.
    """
    if not content_type:
        return None
    m = re.search(r"charset=([^\s;]+)", content_type, flags=re.I)
    if m:
        return m.group(1).strip('"').strip("'")
    return None


def get_ci(headers: Mapping, name: str):
    ln = name.lower()
    for k, v in headers.items():
        if k.lower() == ln:
            return v
    return None


def first_value(headers: Mapping, name: str) -> Optional[str]:
    v = get_ci(headers, name)
    if isinstance(v, (list, tuple)):
        return v[0] if v else None
    return v


def to_multi(headers: Mapping[str, str]) -> Dict[str, List[str]]:
    """Lower-cased name -> list of values, the shape handed back to callers."""
    out: Dict[str, List[str]] = {}
    for k, v in headers.items():
        out.setdefault(k.lower(), []).append(v)
    return out


def flatten(headers: Mapping[str, List[str]]) -> Dict[str, str]:
    return {k: ", ".join(v) for k, v in headers.items()}


def parse_content_range_total(value: str | None) -> Optional[int]:
    """
    'Content-Range: 0-4/5' -> 5, '*/7' -> 7. Returns None for '0-2/*',
    a missing header, or anything that does not look like <range>/<total>.
    A non-integer total raises ValueError.
    """
    if not value:
        return None
    m = _CONTENT_RANGE_RE.match(value)
    if not m:
        return None
    total = m.group(2)
    if total == "*":
        return None
    return int(total)


def redact_headers(hdrs: Mapping | None) -> dict | None:
    if hdrs is None:
        return None
    return {k: ("***" if k.lower() in _REDACT else v) for k, v in hdrs.items()}
