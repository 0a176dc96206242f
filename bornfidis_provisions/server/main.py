"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request monitoring), rate limiting and exception handlers, and includes all
API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bornfidis_provisions.core.database import init_db
from bornfidis_provisions.core.logging_config import get_logger, setup_logging
from bornfidis_provisions.core.monitoring import initialize_logfire

from .api.v1 import (
    bookings,
    chefs,
    community,
    farmers,
    health,
    impact,
    invites,
    webhooks,
)
from .core import constant
from .core.config import DEFAULT_JWT_SECRET, settings
from .core.rate_limit import limiter
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_clients

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup and closes the shared payments and
    messaging HTTP clients on shutdown.
    Startup fails while JWT_SECRET is left at its placeholder value.
    """
    # Startup
    if settings.auth.jwt_secret == DEFAULT_JWT_SECRET:
        logger.error("JWT_SECRET is not set; refusing to start with the placeholder signing secret")
        raise RuntimeError("JWT_SECRET must be set to a private value")

    try:
        logger.info("Starting up Bornfidis Provisions Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Bornfidis Provisions Server...")
    await close_clients()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Bornfidis Provisions API

    Backend for the Bornfidis marketplace connecting farmers, chefs, partners and administrators.
    It handles booking inquiries, chef and farmer assignments, idempotent payouts, invites and impact tracking.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(bookings.router, prefix=f"{constant.API_V1_STR}/bookings")
app.include_router(chefs.router, prefix=f"{constant.API_V1_STR}/chefs")
app.include_router(farmers.router, prefix=f"{constant.API_V1_STR}/farmers")
app.include_router(invites.router, prefix=f"{constant.API_V1_STR}/invites")
app.include_router(impact.router, prefix=f"{constant.API_V1_STR}/impact")
app.include_router(community.router, prefix=constant.API_V1_STR)
app.include_router(webhooks.router, prefix=f"{constant.API_V1_STR}/webhooks")
