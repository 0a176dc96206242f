"""Liveness and version endpoints, mounted outside ``/api/v1``."""

from fastapi import APIRouter

from bornfidis_provisions.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Liveness check. Does not touch the database or the payments and messaging services.",
    response_description="Status object.",
)
async def health_check():
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="API version and the version of the response schemas.",
    response_description="Version object.",
)
async def version():
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
