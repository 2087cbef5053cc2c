"""Per-request id and access log.

The id is taken from an incoming ``X-Request-ID`` header when the caller (a
reverse proxy, usually) already assigned one, otherwise generated. It is put
on ``request.state`` for the error handlers and echoed in the response.

    INFO rc.request PUT /api/v1/payments/<id>/mark-paid 200 23ms req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("rc.request")

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INCOMING_ID = 64


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if incoming and len(incoming) <= _MAX_INCOMING_ID:
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level, "%s %s %d %.0fms %s",
            request.method, request.url.path, response.status_code, elapsed_ms, request_id,
        )
        return response
