"""
Observability middleware and logging setup.

Adds correlation IDs and structured request logging.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("zapshift.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a correlation id and logs its outcome.

    An incoming ``X-Correlation-ID`` is reused so a client can follow one
    booking or payment across retries; handlers can read it from
    ``request.state.correlation_id``.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            "[%s] %s %s -> %d (%.2f ms)",
            correlation_id, request.method, request.url.path, response.status_code, elapsed_ms,
            extra={
                "correlation_id": correlation_id,
                "status_code": response.status_code,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
