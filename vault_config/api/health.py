"""Health check endpoints."""

from typing import Any

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ..client import VaultClient

router = APIRouter()
logger = structlog.get_logger("api.health")


def get_vault_client(request: Request) -> VaultClient:
    """Get the Vault client attached to the application."""
    return request.app.state.vault_client


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Application health check including configuration source."""
    client = get_vault_client(request)
    settings = request.app.state.settings

    health_status = {
        "status": "healthy",
        "version": settings.version,
        "environment": settings.environment,
        "config_state": client.config_state.value,
        "vault": "disconnected",
        "redis": "disconnected",
    }

    if await client.health_check():
        health_status["vault"] = "connected"

    redis_client = getattr(request.app.state, "redis_client", None)
    if redis_client is not None:
        redis_healthy = await redis_client.health_check()
        health_status["redis"] = "healthy" if redis_healthy else "unhealthy"

    return health_status


@router.get("/health/vault")
async def vault_health_check(request: Request) -> JSONResponse:
    """Vault connection health check."""
    client = get_vault_client(request)

    if await client.health_check():
        return JSONResponse({"status": "ok", "vault": "connected"})

    logger.warning("Vault health check failed")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "error", "vault": "disconnected"}
    )
