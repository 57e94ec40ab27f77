"""Redis client built from the Vault-composed service configuration."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import ConnectionError, TimeoutError

from ..config.models import ServiceConfig

logger = logging.getLogger(__name__)


class RedisClient:
    """Async Redis client wrapper configured from a ServiceConfig."""

    def __init__(self, config: ServiceConfig) -> None:
        """Initialize Redis client."""
        self._config = config
        self._client: Optional[Redis] = None
        self._connected = False

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self._connected and self._client:
            return

        try:
            self._client = redis.Redis(**self._config.get_redis_config())

            # Test connection
            await self._client.ping()
            self._connected = True

            logger.info(
                f"Redis connection established to {self._config.redis_host}:{self._config.redis_port} "
                f"(config source: {self._config.source})"
            )

        except (ConnectionError, TimeoutError) as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._connected = False
            raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

        self._connected = False
        logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        try:
            if not self._client:
                return False

            await self._client.ping()
            return True
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False

    @property
    def client(self) -> Redis:
        """Get Redis client instance."""
        if not self._connected or not self._client:
            raise ConnectionError("Redis client is not connected")
        return self._client

    @property
    def is_connected(self) -> bool:
        """Check if Redis client is connected."""
        return self._connected
