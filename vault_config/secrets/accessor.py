"""Secret access over the Vault KV v2 layout."""

import asyncio
from typing import Dict, Iterable, List, Union

import structlog

from .exceptions import (
    SecretDeleteError,
    SecretListError,
    SecretNotFoundError,
    SecretReadError,
    SecretWriteError,
    TransportError,
)
from .transport import VaultTransport

logger = structlog.get_logger("secrets.accessor")

SecretPayload = Dict[str, Union[str, int, float, bool]]

DEFAULT_MOUNT = "secret"


def normalize_path(path: str, allow_empty: bool = False) -> str:
    """Normalize a logical secret path by stripping leading slashes."""
    normalized = path.strip().lstrip("/")
    if not normalized and not allow_empty:
        raise ValueError("Secret path must not be empty")
    return normalized


class SecretAccessor:
    """Reads and writes secrets under a KV v2 mount."""

    def __init__(self, transport: VaultTransport, mount: str = DEFAULT_MOUNT):
        """Initialize the accessor."""
        self._transport = transport
        self._mount = mount.strip("/")

    @property
    def mount(self) -> str:
        """KV v2 mount name."""
        return self._mount

    def data_path(self, path: str) -> str:
        """API path for reading and writing secret data."""
        return f"{self._mount}/data/{normalize_path(path)}"

    def metadata_path(self, path: str, allow_empty: bool = False) -> str:
        """API path for secret metadata (delete, list)."""
        return f"{self._mount}/metadata/{normalize_path(path, allow_empty)}"

    async def get_secret(self, path: str) -> SecretPayload:
        """Read the latest version of a secret."""
        api_path = self.data_path(path)

        try:
            response = await self._transport.request("GET", api_path)
        except TransportError as e:
            if e.status == 404:
                logger.warning("Secret not found", path=path)
                raise SecretNotFoundError(f"Secret not found: {path}", path, e) from e
            logger.error("Failed to read secret", path=path, status=e.status)
            raise SecretReadError(f"Failed to read secret: {path}", path, e) from e

        envelope = response.get("data") if isinstance(response, dict) else None
        payload = envelope.get("data") if isinstance(envelope, dict) else None
        if not payload:
            logger.warning("Secret has no payload", path=path)
            raise SecretNotFoundError(f"Secret has no payload: {path}", path)

        logger.debug("Retrieved secret", path=path, keys=len(payload))
        return payload

    async def set_secret(self, path: str, payload: SecretPayload) -> None:
        """Write a new version of a secret."""
        api_path = self.data_path(path)

        try:
            await self._transport.request("POST", api_path, json={"data": payload})
        except TransportError as e:
            logger.error("Failed to write secret", path=path, status=e.status)
            raise SecretWriteError(f"Failed to write secret: {path}", path, e) from e

        logger.info("Secret written", path=path)

    async def delete_secret(self, path: str) -> None:
        """Delete a secret together with all of its versions."""
        api_path = self.metadata_path(path)

        try:
            await self._transport.request("DELETE", api_path)
        except TransportError as e:
            logger.error("Failed to delete secret", path=path, status=e.status)
            raise SecretDeleteError(f"Failed to delete secret: {path}", path, e) from e

        logger.info("Secret deleted", path=path)

    async def list_secrets(self, path: str = "") -> List[str]:
        """List secret names below a path.

        Vault answers LIST on a path without children with 404, which is
        reported as an empty list.
        """
        api_path = self.metadata_path(path, allow_empty=True)

        try:
            response = await self._transport.request("LIST", api_path)
        except TransportError as e:
            if e.status == 404:
                return []
            logger.error("Failed to list secrets", path=path, status=e.status)
            raise SecretListError(f"Failed to list secrets: {path}", path, e) from e

        return list((response.get("data") or {}).get("keys") or [])

    async def get_secrets(self, paths: Iterable[str]) -> Dict[str, SecretPayload]:
        """Fetch several secrets concurrently.

        A failed path maps to an empty payload; the batch itself never fails.
        """
        paths = list(paths)

        async def fetch(path: str) -> SecretPayload:
            try:
                return await self.get_secret(path)
            except Exception as e:
                logger.warning("Failed to get secret for path", path=path, error=str(e))
                return {}

        payloads = await asyncio.gather(*(fetch(path) for path in paths))
        return dict(zip(paths, payloads))
