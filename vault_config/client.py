"""Vault client composition root.

A VaultClient is constructed explicitly and passed to whatever needs it.
It owns the transport, the secret accessor, the configuration manager and
the token renewal task, and releases all of them on close().
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog

from .config.cache import ConfigCache, ConfigState
from .config.manager import VaultConfigManager
from .config.models import ServiceConfig
from .config.settings import Settings
from .secrets.accessor import SecretAccessor, SecretPayload
from .secrets.exceptions import VaultConfigurationError
from .secrets.renewal import TokenRenewer
from .secrets.transport import VaultCredential, VaultTransport

logger = structlog.get_logger("client")


class VaultClient:
    """Vault-backed configuration client for a single service."""

    def __init__(self, settings: Settings):
        """Initialize the client. Raises VaultConfigurationError without a token."""
        if not settings.vault_token:
            raise VaultConfigurationError("VAULT_TOKEN environment variable is required")

        self._settings = settings
        self.transport = VaultTransport(
            address=settings.vault_addr,
            credential=VaultCredential(token=settings.vault_token, namespace=settings.vault_namespace),
            timeout=settings.request_timeout,
            health_timeout=settings.health_timeout,
        )
        self.secrets = SecretAccessor(self.transport, mount=settings.vault_mount)
        self.config = VaultConfigManager(
            self.secrets,
            service_name=settings.service_name,
            cache=ConfigCache(ttl=settings.config_cache_seconds),
        )
        self.renewer = TokenRenewer(self.transport, interval=settings.renew_interval)

        logger.info(
            "Vault client created",
            address=settings.vault_addr,
            service=settings.service_name,
            namespace=settings.vault_namespace
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "VaultClient":
        """Create a client from settings read from the environment."""
        return cls(settings or Settings())

    async def __aenter__(self) -> "VaultClient":
        await self.start(preload=False)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self, preload: bool = True) -> Optional[ServiceConfig]:
        """Start token renewal and optionally preload the configuration."""
        self.renewer.start()

        if not preload:
            return None

        config = await self.config.get_config()
        if config.is_fallback:
            logger.warning("Vault configuration unavailable at startup, using fallback")
        else:
            logger.info("Vault configuration preloaded successfully")
        return config

    async def close(self) -> None:
        """Stop background renewal and close the HTTP client."""
        await self.renewer.stop()
        await self.transport.aclose()
        logger.info("Vault client closed")

    @property
    def config_state(self) -> ConfigState:
        return self.config.state

    # Configuration

    async def get_config(self) -> ServiceConfig:
        """Get the composed service configuration."""
        return await self.config.get_config()

    async def get_config_value(self, key: str) -> Any:
        """Get a single configuration field."""
        return await self.config.get_config_value(key)

    # Secret operations

    async def get_secret(self, path: str) -> SecretPayload:
        return await self.secrets.get_secret(path)

    async def get_secrets(self, paths: Iterable[str]) -> Dict[str, SecretPayload]:
        return await self.secrets.get_secrets(paths)

    async def list_secrets(self, path: str = "") -> List[str]:
        return await self.secrets.list_secrets(path)

    async def update_secret(self, path: str, payload: SecretPayload) -> None:
        """Write a secret and invalidate the cached configuration."""
        await self.config.update_secret(path, payload)

    async def remove_secret(self, path: str) -> None:
        """Delete a secret and invalidate the cached configuration."""
        await self.config.delete_secret(path)

    # Well-known secrets

    async def get_common_config(self) -> SecretPayload:
        return await self.secrets.get_secret("common/environment")

    async def get_database_config(self) -> SecretPayload:
        return await self.secrets.get_secret("database/config")

    async def get_redis_config(self) -> SecretPayload:
        return await self.secrets.get_secret("redis/config")

    async def get_jwt_config(self) -> SecretPayload:
        return await self.secrets.get_secret("jwt/config")

    # Token and health

    async def renew_token(self) -> bool:
        """Renew the token immediately."""
        return await self.renewer.renew_once()

    async def get_token_info(self) -> Dict[str, Any]:
        """Look up the current token."""
        response = await self.transport.request("GET", "auth/token/lookup-self")
        return response.get("data") or {}

    async def health_check(self) -> bool:
        """Check Vault health. Never raises."""
        return await self.transport.health_check()
