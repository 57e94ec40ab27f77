"""
FastAPI application exposing Vault-backed configuration health.

The service builds a VaultClient at startup, preloads the composed
configuration (falling back to environment variables if Vault is down),
keeps the token renewed in the background and closes everything on shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from .api.health import router as health_router
from .client import VaultClient
from .config.settings import Settings, settings as default_settings
from .database.redis_client import RedisClient
from .utils.logging import log_error, setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown events."""
    app_settings: Settings = app.state.settings
    logger.info("Starting Vault Config Service", version=app_settings.version)

    if getattr(app.state, "vault_client", None) is None:
        app.state.vault_client = VaultClient(app_settings)
    client: VaultClient = app.state.vault_client

    config = await client.start(preload=True)

    redis_client = RedisClient(config)
    try:
        await redis_client.connect()
    except Exception as e:
        logger.warning("Redis unavailable at startup", error=str(e))
    app.state.redis_client = redis_client

    logger.info("All services initialized", config_source=config.source)

    try:
        yield  # Application is running
    finally:
        logger.info("Shutting down services")

        try:
            await redis_client.disconnect()
        except Exception as e:
            log_error(e, {"phase": "shutdown", "component": "redis"})

        await client.close()

        logger.info("Shutdown completed")


def create_app(
    app_settings: Optional[Settings] = None,
    vault_client: Optional[VaultClient] = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.version,
        description="Vault-backed configuration with caching, token renewal and fallback",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.vault_client = vault_client

    app.include_router(health_router, tags=["Health"])

    return app


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    setup_logging()

    logger.info(
        "Starting development server",
        host=default_settings.host,
        port=default_settings.port
    )

    uvicorn.run(
        create_app(),
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
        access_log=True
    )
