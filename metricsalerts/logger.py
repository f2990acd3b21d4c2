"""JSON logging setup and request logging middleware."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable
from datetime import datetime, timezone

from werkzeug.wrappers import Request, Response

log = logging.getLogger(__name__)

Handler = Callable[[Request], Response]

_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RESERVED
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def init_logging() -> None:
    """Send log records at INFO and above to stdout as JSON lines."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_metricsalerts_json", False):
            root.removeHandler(existing)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter())
    handler._metricsalerts_json = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def with_logger(handler: Handler) -> Handler:
    """Wrap ``handler`` so each request is logged with its status and size."""

    def wrapped(request: Request) -> Response:
        start = time.perf_counter()
        query = request.query_string.decode("latin-1")
        uri = request.path + (f"?{query}" if query else "")
        response = handler(request)
        elapsed = time.perf_counter() - start
        log.info(
            "request obtained",
            extra={
                "uri": uri,
                "method": request.method,
                "elapsed": elapsed,
                "status": response.status_code,
                "size": len(response.get_data()),
            },
        )
        return response

    return wrapped