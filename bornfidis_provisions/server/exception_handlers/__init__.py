"""
Exception handlers for the Bornfidis Provisions API.

All error responses share the ``{"success": false, "error": ...}`` envelope.
Domain errors carry their own status code; anything unexpected becomes a 500.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from bornfidis_provisions.core.errors import BornfidisError
from bornfidis_provisions.core.logging_config import get_logger

from .domain_handlers import (
    domain_exception_handler,
    http_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register every handler on ``app``; call once at startup."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BornfidisError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")


__all__ = ["setup_exception_handlers"]
