"""Request logging middleware.

Logs every HTTP request with method, path, caller, status code and latency,
plus a short request ID for correlation. The request_id is also injected
into request.state so handlers can put it into the ApiResponse envelope.

Log format:
    INFO [POST] /api/v1/completions/task-1 user=kid-1 → 201 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("hh.request")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "[%s] %s user=%s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            request.headers.get("x-user-id", "-"),
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        return response
