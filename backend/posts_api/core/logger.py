"""JSON logging for the posts service, correlated by request id.

Every record is one JSON object on stdout carrying the service name and the
request id of the request being served (``None`` outside requests). The id is
taken from ``X-Request-ID`` / ``X-Correlation-ID`` when the caller sends one,
otherwise generated, and echoed back in the ``X-Request-ID`` response header.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

SERVICE_NAME = "posts-api"
REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")
MAX_REQUEST_ID_LENGTH = 128

# ``extra=`` keys set by call sites: timing decorator, post routes, Users API client.
EXTRA_KEYS = ("endpoint", "elapsed_ms", "post_id", "author_id", "status")


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    :param service: Value of the ``service`` field on every record.
    :param extra_keys: Record attributes copied onto the payload when present.
    """

    def __init__(self, service: str = SERVICE_NAME, extra_keys: Iterable[str] = EXTRA_KEYS) -> None:
        super().__init__()
        self.service = service
        self.extra_keys = tuple(extra_keys)

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "service": self.service,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({key: getattr(record, key) for key in self.extra_keys if hasattr(record, key)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record passing through the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _incoming_request_id() -> str | None:
    for header in CORRELATION_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value:
            return value[:MAX_REQUEST_ID_LENGTH]
    return None


def ensure_request_id() -> str:
    """Return the id of the current request, assigning one on first use.

    Outside a request context a fresh uuid4 is returned and nothing is stored.
    """

    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        request_id = _incoming_request_id() or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO", *, service: str = SERVICE_NAME) -> None:
    """Route the root logger to stdout as JSON at ``level``.

    Unknown level names fall back to ``INFO``.
    """

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service=service))
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Assign a request id per request and echo it on the response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        # ``g`` outlives the request when an app context is reused.
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "SERVICE_NAME", "configure_logging", "ensure_request_id", "init_app"]
