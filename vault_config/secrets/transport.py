"""HTTP transport for the Vault REST API."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from .exceptions import TransportError

logger = structlog.get_logger("secrets.transport")

API_VERSION = "v1"
HEALTH_PATH = "sys/health"


@dataclass(frozen=True)
class VaultCredential:
    """Bearer token plus optional namespace presented on every request."""
    token: str = field(repr=False)
    namespace: str | None = None

    def headers(self) -> dict[str, str]:
        """Build the authentication headers for this credential."""
        headers = {"X-Vault-Token": self.token}
        if self.namespace:
            headers["X-Vault-Namespace"] = self.namespace
        return headers


class VaultTransport:
    """Async Vault API transport with a bounded timeout and no retries."""

    def __init__(
        self,
        address: str,
        credential: VaultCredential,
        timeout: float = 5.0,
        health_timeout: float = 3.0,
    ):
        """Initialize the transport."""
        self._address = address.rstrip("/")
        self._credential = credential
        self._timeout = timeout
        self._health_timeout = health_timeout

        self._client = httpx.AsyncClient(
            base_url=f"{self._address}/{API_VERSION}",
            timeout=httpx.Timeout(timeout),
            headers={
                "Content-Type": "application/json",
                **credential.headers()
            }
        )

    @property
    def address(self) -> str:
        """Vault server address."""
        return self._address

    @property
    def credential(self) -> VaultCredential:
        """Credential currently attached to requests."""
        return self._credential

    def replace_credential(self, credential: VaultCredential) -> None:
        """Swap the credential used for subsequent requests."""
        self._client.headers.pop("X-Vault-Namespace", None)
        self._client.headers.update(credential.headers())
        self._credential = credential
        logger.info("Vault credential replaced", namespace=credential.namespace)

    async def request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        """Issue an authenticated request and return the decoded JSON body.

        Raises TransportError on network failure, non-2xx status or an
        undecodable body. The caller owns retry and fallback policy.
        """
        method = method.upper()
        path = path.lstrip("/")

        try:
            # httpx bounds each phase separately; the whole round trip shares one deadline
            response = await asyncio.wait_for(
                self._client.request(method, path, json=json),
                timeout=self._timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("Vault request timed out", method=method, path=path)
            raise TransportError("Request timeout", path=path) from e
        except httpx.RequestError as e:
            logger.error("Vault request failed", method=method, path=path, error=str(e))
            raise TransportError(f"Request failed: {e}", path=path) from e

        if not response.is_success:
            logger.error(
                "Vault API error",
                method=method,
                path=path,
                status=response.status_code,
                errors=self._extract_errors(response)
            )
            raise TransportError(
                f"Vault returned HTTP {response.status_code}",
                status=response.status_code,
                path=path
            )

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON from Vault", method=method, path=path, status=response.status_code)
            raise TransportError("Invalid JSON response", status=response.status_code, path=path) from e

    async def health_check(self) -> bool:
        """Check that Vault is reachable, initialized and unsealed."""
        url = f"{self._address}/{API_VERSION}/{HEALTH_PATH}"
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._health_timeout)) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Vault health check failed", error=str(e))
            return False

        if response.status_code != 200:
            logger.warning("Vault is not healthy", status=response.status_code)
            return False
        return True

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @staticmethod
    def _extract_errors(response: httpx.Response) -> list[str]:
        try:
            body = response.json()
        except ValueError:
            return []
        return body.get("errors", []) if isinstance(body, dict) else []
