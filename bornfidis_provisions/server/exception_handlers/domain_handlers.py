"""
Handlers for expected errors.

Every expected failure is rendered as ``{"success": false, "error": <message>}``:

- request validation errors -> 400 with the first validation message
- ``BornfidisError`` subclasses -> their own status code
- ``HTTPException`` -> its status code and detail
- rate limit exceeded -> 429
"""

from typing import Any, Dict, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from bornfidis_provisions.core.errors import BornfidisError
from bornfidis_provisions.core.logging_config import get_logger

logger = get_logger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def _first_message(errors: List[Dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX) :]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    return f"{field}: {message}" if field else message


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    message = _first_message(errors)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": message,
            "details": [
                {"loc": [str(part) for part in e.get("loc", ())], "msg": str(e.get("msg", "")), "type": e.get("type")}
                for e in errors
            ],
        },
    )


async def domain_exception_handler(request: Request, exc: BornfidisError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    content: Dict[str, Any] = {"success": False, "error": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.url.path} ({exc.detail})")
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": "Too many requests. Please try again later."},
    )
