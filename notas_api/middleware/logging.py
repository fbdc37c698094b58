"""
Notas API — Access Log Middleware
==================================

What:  Tags each request with a short id and writes one access-log line
       once it has been answered.
Why:   The id groups every log line of one request (access line plus the
       exception handlers' lines) and is echoed in X-Request-ID so a
       front-end can quote it when reporting a failure.
How:   The id is the client's X-Request-ID when it is a short token,
       otherwise 8 random hex chars. It lives in a ContextVar for the rest
       of the request.

Log line:
    2025-01-15T12:00:00 [INFO] notas_api.access: POST /usuarios 200 84.2ms [1a2b3c4d] from 10.0.0.7

What we DON'T log: request bodies. They carry passwords (POST /login,
POST /usuarios) and personal data.
"""

import logging
import re
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("notas_api.access")

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids end up verbatim in log lines
_CLIENT_ID = re.compile(r"^[A-Za-z0-9-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value):
    if header_value and _CLIENT_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request id, then logs the answered request.

    Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
    GET /health gets an id but no log line; load balancers poll it every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)

        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid

        path = request.url.path
        if path == "/health":
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        client_ip = request.client.host if request.client else "unknown"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
