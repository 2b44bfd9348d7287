from typing import Iterable, Optional

REST_ROOT = "/rest/v1"


def table_endpoint(name: str) -> str:
    return "/" + name


def rpc_endpoint(name: str) -> str:
    return "/rpc/" + name


def normalize_rest_url(url: str) -> str:
    """
    Make sure exactly one /rest/v1 sits between the project host and the endpoint.
    'https://x.supabase.co' and 'https://x.supabase.co/' both become
    'https://x.supabase.co/rest/v1'; already-normalized URLs come back unchanged.
    """
    if url.endswith(REST_ROOT):
        return url
    if url.endswith(REST_ROOT + "/"):
        return url[:-1]
    if url.endswith("/"):
        return url + REST_ROOT.lstrip("/")
    return url + REST_ROOT


def build_query_string(segments: Iterable[Optional[str]]) -> str:
    # segments are already 'key=value' or raw PostgREST filters; no re-encoding
    return "&".join(s for s in segments if s)


def with_query(uri: str, segments: Iterable[Optional[str]]) -> str:
    qs = build_query_string(segments)
    if not qs:
        return uri
    return f"{uri}?{qs}"
