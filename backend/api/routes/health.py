"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import aiofiles.os
from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    data_root: str
    account_store: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    The service is ready once the data root exists.
    """
    settings = get_settings()
    available = await aiofiles.os.path.isdir(settings.data_root)
    return ReadinessResponse(
        status="ready" if available else "degraded",
        data_root="available" if available else "missing",
        account_store=settings.account_store_backend,
    )
