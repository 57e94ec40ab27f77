"""Periodic Vault token renewal."""

import asyncio
from typing import Optional

import structlog

from .transport import VaultCredential, VaultTransport

logger = structlog.get_logger("secrets.renewal")

RENEW_SELF_PATH = "auth/token/renew-self"
DEFAULT_RENEW_INTERVAL = 50 * 60  # seconds; tokens typically last one hour


class TokenRenewer:
    """Renews the client token on a fixed interval in a background task.

    Renewal failures are logged and the loop keeps running, since the
    current token may remain valid until its original expiry.
    """

    def __init__(self, transport: VaultTransport, interval: float = DEFAULT_RENEW_INTERVAL):
        """Initialize the token renewer."""
        self._transport = transport
        self._interval = interval
        self._task: Optional[asyncio.Task] = None
        self.renewals = 0
        self.failures = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """Check if the renewal loop is active."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the renewal loop on the running event loop."""
        if self.is_running:
            return

        self._task = asyncio.create_task(self._run(), name="vault-token-renewal")
        logger.info("Token auto-renewal started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the renewal loop and wait for it to finish."""
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        logger.info("Token auto-renewal stopped")

    async def renew_once(self) -> bool:
        """Renew the token once. Never raises."""
        try:
            response = await self._transport.request("POST", RENEW_SELF_PATH)
            auth = response.get("auth") if isinstance(response, dict) else None
            if not isinstance(auth, dict):
                auth = {}

            new_token = auth.get("client_token")
            current = self._transport.credential
            if isinstance(new_token, str) and new_token and new_token != current.token:
                self._transport.replace_credential(
                    VaultCredential(token=new_token, namespace=current.namespace)
                )
        except Exception as e:
            self.failures += 1
            logger.error("Failed to renew Vault token", error=str(e), error_type=type(e).__name__)
            return False

        self.renewals += 1
        logger.info("Vault token renewed successfully", lease_duration=auth.get("lease_duration"))
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.renew_once()
