"""Request ID middleware for FastAPI.

Binds a request ID to the logging context for the duration of each request
and echoes it back in the response headers.
"""

import re
import time

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from dashapi.core.logging import clear_request_id, set_request_id

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs are accepted only in this shape
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """HTTP middleware that propagates a request ID through logs and headers.

    A well-formed ``X-Request-ID`` header from the client is reused;
    otherwise a new ID is generated.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and not REQUEST_ID_PATTERN.match(incoming):
            incoming = None

        request_id = set_request_id(incoming)
        start_time = time.time()

        try:
            response = await call_next(request)

            route = request.scope.get("route")
            logger.info(
                "request_completed",
                method=request.method,
                endpoint=route.path if route else "/unmatched",
                status=response.status_code,
                duration_ms=int((time.time() - start_time) * 1000),
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_id()
