# supabase_rest/registry/http/client.py
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

import requests

logger = logging.getLogger("supabase.http")

DEFAULT_TIMEOUT = 30.0


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


# ---- response model ----


@dataclass
class HttpResponse:
    status: int
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]
    elapsed_ms: int


# ---- transport ----


class HttpTransport:
    """
    Blocking one-shot transport:
      resp = HttpTransport().send("GET", url, headers)

    Each call opens its own requests.Session and closes it on every exit path.
    Connection, DNS and TLS failures surface as requests.RequestException;
    nothing is retried here. Non-2xx responses are returned, not raised.
    """

    def __init__(self, timeout: Optional[float] = None, verify: bool = True) -> None:
        if timeout is None:
            timeout = _env_float("SUPABASE_HTTP_TIMEOUT", DEFAULT_TIMEOUT)
        self.timeout = float(timeout)
        self.verify = bool(verify)

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> HttpResponse:
        t0 = time.time()
        with requests.Session() as session:
            resp = session.request(
                method.upper(),
                url,
                headers=dict(headers or {}),
                data=data,
                timeout=self.timeout,
                verify=self.verify,
            )
            # read the full body before the session is released
            body = resp.content
            elapsed_ms = int((time.time() - t0) * 1000)
            logger.debug("%s %s -> %d (%dms)", method.upper(), url, resp.status_code, elapsed_ms)
            return HttpResponse(
                status=resp.status_code,
                url=resp.url or url,
                headers=dict(resp.headers.items()),
                body=body,
                elapsed_ms=elapsed_ms,
            )
