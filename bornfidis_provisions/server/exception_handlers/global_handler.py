"""
Catch-all handler for exceptions no other handler claims.

The client only ever sees the generic envelope; the message and traceback
stay in the logs, keyed by ``error_id`` so a support request can be traced.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.monitoring import log_error

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_id = id(exc)
    error_type = type(exc).__name__
    path = request.url.path

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {path}: {exc}",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "error_type": error_type,
            "method": request.method,
            "path": path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
        },
    )
    log_error(error_type, str(exc), {"error_id": error_id, "path": path})

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "error_id": error_id,
            "error_type": error_type,
        },
    )
