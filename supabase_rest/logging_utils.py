from __future__ import annotations
import json
import logging
import os
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Per-dispatch correlation ID
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="-")

_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # provide %(correlation_id)s to all formatters
        record.correlation_id = correlation_id_ctx.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
        }
        event = getattr(record, "event", None)
        if event is not None:
            payload["event"] = event
        return json.dumps(payload, ensure_ascii=True, default=str)


_CONFIGURED = False


def _env_truthy(name: str, default: str = "true") -> bool:
    val = os.getenv(name, default)
    return str(val).strip().lower() in {"true", "1", "t", "yes", "y", "on"}


def setup_logging(level: Optional[int] = None) -> None:
    """
    Idempotent logging setup that ensures %(correlation_id)s is available in all log lines.
    LOG_JSON=true switches every handler to one JSON object per line.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    filt = CorrelationIdFilter()
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(level or logging.INFO)
    else:
        for h in root.handlers:
            # Ensure formatter includes correlation_id
            fmt = getattr(h.formatter, "_fmt", "") if h.formatter else ""
            if "%(correlation_id)" not in (fmt or ""):
                h.setFormatter(logging.Formatter(_FORMAT))

    # filters on handlers also see records propagated from child loggers
    for h in root.handlers:
        h.addFilter(filt)

    if _env_truthy("LOG_JSON", "false"):
        for h in root.handlers:
            h.setFormatter(JsonFormatter())

    _CONFIGURED = True


@contextmanager
def correlation_scope(correlation_id: Optional[str]) -> Iterator[str]:
    """Bind a correlation id for log lines emitted inside the block."""
    cid = correlation_id or "-"
    token = correlation_id_ctx.set(cid)
    try:
        yield cid
    finally:
        correlation_id_ctx.reset(token)
