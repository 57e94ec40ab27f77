"""Composed configuration management backed by Vault secrets."""

import asyncio
import time
from typing import Any, Callable, Dict, Optional

import structlog

from ..secrets.accessor import SecretAccessor, SecretPayload
from .cache import ConfigCache, ConfigState
from .fallback import FallbackResolver
from .models import ServiceConfig

logger = structlog.get_logger("config.manager")


class VaultConfigManager:
    """Fetches, caches and degrades the composed service configuration.

    This is the only layer that turns secret access failures into a
    fallback configuration. Fallback results are never cached, so every
    call after a failure retries Vault.

    Concurrent calls on a cold or expired cache share a single in-flight
    fetch instead of each issuing their own reads.
    """

    def __init__(
        self,
        accessor: SecretAccessor,
        service_name: str = "auth-service",
        cache: Optional[ConfigCache] = None,
        fallback: Optional[FallbackResolver] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the configuration manager."""
        self._accessor = accessor
        self._service_name = service_name
        self._cache = cache or ConfigCache()
        self._fallback = fallback or FallbackResolver()
        self._clock = clock
        self._inflight: Optional[asyncio.Future] = None
        self._generation = 0

    @property
    def state(self) -> ConfigState:
        """Current configuration sourcing state."""
        return self._cache.state

    @property
    def secret_paths(self) -> Dict[str, str]:
        """Logical secret paths composed into the configuration."""
        return {
            "jwt": "jwt/config",
            "service": f"{self._service_name}/config",
            "oauth": f"{self._service_name}/oauth",
            "redis": "redis/config",
        }

    async def get_config(self) -> ServiceConfig:
        """Get the composed configuration, fetching from Vault on a cache miss."""
        cached = self._cache.get(self._clock())
        if cached is not None:
            return cached

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._refresh(self._generation))
            self._inflight.add_done_callback(self._clear_inflight)

        return await asyncio.shield(self._inflight)

    async def get_config_value(self, key: str) -> Any:
        """Get a single configuration field by name."""
        config = await self.get_config()
        return config.get(key)

    def invalidate(self) -> None:
        """Drop the cached configuration so the next read refetches."""
        self._generation += 1
        self._inflight = None
        self._cache.invalidate()
        logger.debug("Configuration cache invalidated")

    async def update_secret(self, path: str, payload: SecretPayload) -> None:
        """Write a secret through to Vault and invalidate the cache."""
        await self._accessor.set_secret(path, payload)
        logger.info("Secret updated in Vault", path=path)
        self.invalidate()

    async def delete_secret(self, path: str) -> None:
        """Delete a secret in Vault and invalidate the cache."""
        await self._accessor.delete_secret(path)
        logger.info("Secret deleted from Vault", path=path)
        self.invalidate()

    async def _refresh(self, generation: int) -> ServiceConfig:
        # A fetch superseded before it began never touches the cache
        if generation == self._generation:
            self._cache.begin_fetch()
        paths = self.secret_paths

        logger.info("Fetching configuration from Vault", service=self._service_name)

        # All four reads are awaited even if one fails early
        results = await asyncio.gather(
            *(self._accessor.get_secret(path) for path in paths.values()),
            return_exceptions=True
        )

        try:
            for result in results:
                if isinstance(result, Exception):
                    raise result
            jwt_config, service_config, oauth_config, redis_config = results
            config = ServiceConfig.from_secrets(jwt_config, service_config, oauth_config, redis_config)
        except Exception as e:
            logger.error(
                "Failed to load configuration from Vault",
                service=self._service_name,
                error=str(e),
                error_type=type(e).__name__
            )
            if generation == self._generation:
                self._cache.mark_fallback()
            return self._fallback.resolve()

        if generation == self._generation:
            self._cache.store(config, self._clock())
            logger.info("Configuration loaded from Vault", service=self._service_name)
        else:
            logger.info("Configuration changed during fetch, not caching", service=self._service_name)

        return config

    def _clear_inflight(self, future: asyncio.Future) -> None:
        if self._inflight is future:
            self._inflight = None
