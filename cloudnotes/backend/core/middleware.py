"""
Request Context Middleware.

Request id propagation, timing, client identification and structlog
context binding for every HTTP request.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cloudnotes.backend.core.logging import get_logger
from cloudnotes.backend.core.utils import utc_now

logger = get_logger(__name__)

# Values accepted in X-Frontend-ID; anything else is logged as "unknown"
KNOWN_FRONTENDS = {"web", "cli", "shell", "internal"}


def _elapsed_ms(start) -> int:
    return int((utc_now() - start).total_seconds() * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    - Generates or propagates X-Request-ID
    - Reads the client identifier from X-Frontend-ID (web, cli, shell, internal)
    - Sets X-Response-Time on the response
    - Binds request_id, frontend, method and path into structlog contextvars
      so every log line of the request carries them

    Handlers can read request.state.request_id, request.state.frontend and
    request.state.start_time.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
        if frontend not in KNOWN_FRONTENDS:
            frontend = "unknown"

        start_time = utc_now()
        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": _elapsed_ms(start_time),
                    "error_type": type(exc).__name__,
                },
            )
            raise
        else:
            duration_ms = _elapsed_ms(start_time)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            logger.info(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
