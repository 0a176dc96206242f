"""
Pydantic Logfire integration.

Logfire is opt-in: it is configured only when ``LOGFIRE_ENABLED`` is true and
``LOGFIRE_TOKEN`` is set. Once configured it traces SQLAlchemy queries, the
HTTPX calls to the payments and messaging services, and FastAPI endpoints.

The ``log_*`` helpers are safe to call either way. Before Logfire is ready
they fall back to the standard logger, and an exporter failure never
propagates into request handling.
"""

import logging
import os
from typing import Any, Callable, Optional

import logfire
from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _env_flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_PROJECT_NAME = os.getenv("LOGFIRE_PROJECT_NAME", "bornfidis-provisions")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "bornfidis-provisions-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.1.0")
LOGFIRE_SAMPLE_RATE = float(os.getenv("LOGFIRE_SAMPLE_RATE", "1.0"))

LOGFIRE_TRACE_SQLALCHEMY = _env_flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_HTTPX = _env_flag("LOGFIRE_TRACE_HTTPX", "true")
LOGFIRE_TRACE_FASTAPI = _env_flag("LOGFIRE_TRACE_FASTAPI", "true")

_logfire_ready = False


def is_logfire_ready() -> bool:
    return _logfire_ready


def _instrument(name: str, instrument: Callable[[], Any]) -> None:
    try:
        instrument()
    except Exception as e:
        logger.warning(f"Failed to instrument {name}: {e}")
    else:
        logger.info(f"Logfire: {name} instrumentation enabled")


def initialize_logfire(app: Optional[FastAPI] = None) -> None:
    """
    Configure Logfire and turn on auto-instrumentation.

    Each instrumentation is toggled by its ``LOGFIRE_TRACE_*`` flag; one that
    fails is logged and skipped. FastAPI is only instrumented when ``app`` is
    given. A failure to configure Logfire itself leaves monitoring off.
    """
    global _logfire_ready

    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is set but LOGFIRE_TOKEN is missing; monitoring stays off.")
        return

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
            sampling=logfire.SamplingOptions(head=LOGFIRE_SAMPLE_RATE),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return

    if LOGFIRE_TRACE_SQLALCHEMY:
        _instrument("SQLAlchemy", logfire.instrument_sqlalchemy)
    if LOGFIRE_TRACE_HTTPX:
        _instrument("HTTPX", logfire.instrument_httpx)
    if LOGFIRE_TRACE_FASTAPI:
        if app is not None:
            _instrument("FastAPI", lambda: logfire.instrument_fastapi(app=app))
        else:
            logger.debug("No FastAPI app given, skipping FastAPI instrumentation")

    _logfire_ready = True
    logger.info(
        f"Logfire monitoring initialized: project={LOGFIRE_PROJECT_NAME}, "
        f"environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}"
    )


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    if not _logfire_ready:
        logger.debug(f"API request completed: {method} {path} -> {status_code} ({duration_ms:.2f}ms)")
        return
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_payout_event(
    kind: str,
    outcome: str,
    reference_id: str,
    amount_cents: Optional[int] = None,
    **context: Any,
) -> None:
    """
    Record the outcome of one payout attempt.

    Args:
        kind: ``chef``, ``farmer`` or ``ingredient``
        outcome: ``created``, ``blocked``, ``failed`` or ``skipped``
        reference_id: Booking or assignment the payout belongs to
        amount_cents: Transfer amount, when known
        context: Extra attributes such as blockers, transfer id or error
    """
    if not _logfire_ready:
        logger.debug(f"Payout {kind} {outcome}: ref={reference_id} amount_cents={amount_cents}")
        return
    try:
        logfire.info(
            "Payout {kind} {outcome}",
            kind=kind,
            outcome=outcome,
            reference_id=reference_id,
            amount_cents=amount_cents,
            **context,
        )
    except Exception:
        logger.debug(f"Could not log payout event to Logfire: {kind} {reference_id}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    # The standard logger already has the full error from the caller.
    if not _logfire_ready:
        return
    try:
        logfire.error(f"{error_type}: {error_message}", **(context or {}))
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
