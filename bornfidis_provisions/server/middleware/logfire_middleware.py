"""
Request timing middleware.

Every request is timed and reported through ``log_api_request`` (a Logfire
span attribute set when Logfire is configured, a DEBUG line otherwise).
Requests slower than ``SLOW_REQUEST_MS`` are also logged as warnings, and the
elapsed time is returned to the client in ``X-Process-Time``.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000


def _elapsed_ms(started: float) -> float:
    return (time.time() - started) * 1000


class LogfireMiddleware(BaseHTTPMiddleware):
    """Times requests and reports them to the monitoring helpers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.time()
        method, path = request.method, request.url.path

        # Exception handlers read these to enrich their log lines.
        request.state.start_time = started
        request.state.method = method
        request.state.path = path

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = _elapsed_ms(started)
            log_api_request(method=method, path=path, status_code=500, duration_ms=duration_ms)
            logger.error(
                f"API request failed: {method} {path}: {e}",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms},
            )
            raise

        duration_ms = _elapsed_ms(started)
        status_code = response.status_code
        log_api_request(method=method, path=path, status_code=status_code, duration_ms=duration_ms)
        response.headers["X-Process-Time"] = f"{duration_ms:.3f}"

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} -> {status_code} took {duration_ms:.2f}ms",
                extra={"method": method, "path": path, "duration_ms": duration_ms, "status_code": status_code},
            )
        return response
