"""
Observability: logging setup and request correlation middleware.

Adds correlation IDs and structured logging context to requests.
"""

import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("fleetflow.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is controlled by settings.db_echo, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # 1. Generate or extract Correlation ID
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))

        # 2. Start Timer
        start_time = time.perf_counter()

        # 3. Process Request
        response = await call_next(request)

        # 4. Calculate Duration
        process_time = (time.perf_counter() - start_time) * 1000  # ms

        # 5. Add Header to Response
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{process_time:.2f}"

        # 6. Structured Log
        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(process_time, 2),
            "ip": request.client.host if request.client else "unknown"
        }

        message = "%s %s -> %s (%.2f ms)"
        args = (request.method, request.url.path, response.status_code, process_time)
        if response.status_code >= 500:
            logger.error(message, *args, extra=log_data)
        elif response.status_code >= 400:
            logger.warning(message, *args, extra=log_data)
        else:
            logger.info(message, *args, extra=log_data)

        return response
