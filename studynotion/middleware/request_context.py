"""Request context middleware: correlation ids for every request.

A checkout touches the payment gateway, the store and the email queue.
When a buyer reports "I paid but I'm not enrolled", operators need every
log line from that one request.  This middleware:

  1. Reuses the caller's X-Request-ID header or generates a UUID4
  2. Stores it in a ContextVar so any module can log it without the id
     being threaded through function arguments
  3. Times the request and logs one summary line on completion
  4. Echoes the id back in the X-Request-ID response header

ContextVars (not thread-locals) are used because concurrent requests
share the event loop thread; each asyncio task gets its own copy.

The authenticated account id is stored the same way by the auth
dependency (see ``user_id_var``) so log lines emitted after login carry
both identifiers.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
user_id_var: ContextVar[str] = ContextVar("user_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Copy the current request/user ids onto every LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        if not hasattr(record, "user_id"):
            record.user_id = user_id_var.get("-")  # type: ignore[attr-defined]
        return True


def install_request_context_filter() -> None:
    """Attach the filter to the root handlers (idempotent).

    Filters on a logger only apply to records logged directly on it, so
    the filter goes on the handlers that every propagated record reaches.
    """
    root = logging.getLogger()
    targets: list[logging.Filterer] = [root, *root.handlers]
    for target in targets:
        if not any(isinstance(f, _RequestContextFilter) for f in target.filters):
            target.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, time the request and log a summary line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_token = request_id_var.set(req_id)
        user_token = user_id_var.set("-")

        start = time.monotonic()
        try:
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            logger.info(
                "%s %s → %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={
                    "request_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
        finally:
            request_id_var.reset(request_token)
            user_id_var.reset(user_token)

        response.headers["X-Request-ID"] = req_id
        return response
