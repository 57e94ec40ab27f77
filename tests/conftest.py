"""Global test configuration and fixtures."""

import json
from typing import AsyncGenerator, Iterator

import httpx
import pytest
import respx
import fakeredis.aioredis as fakeredis

from vault_config.config.settings import Settings
from vault_config.secrets.accessor import SecretAccessor
from vault_config.secrets.transport import VaultCredential, VaultTransport

VAULT_ADDR = "http://vault.test:8200"
VAULT_TOKEN = "test-token"


class FakeVaultServer:
    """In-memory stand-in for the Vault HTTP API, served through respx."""

    def __init__(self, mount: str = "secret", token: str = VAULT_TOKEN):
        self.mount = mount
        self.token = token
        self.secrets: dict[str, dict] = {}
        self.versions: dict[str, int] = {}
        self.failing_paths: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.sealed = False
        self.unreachable = False
        self.renew_fails = False
        self.renewals = 0
        self.issue_token: str | None = None

    def reads_of(self, path: str) -> int:
        """Number of data reads issued for a logical path."""
        target = f"/v1/{self.mount}/data/{path}"
        return sum(1 for r in self.requests if r.method == "GET" and r.url.path == target)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        self.requests.append(request)
        path = request.url.path

        if path == "/v1/sys/health":
            if self.sealed:
                return httpx.Response(503, json={"initialized": True, "sealed": True})
            return httpx.Response(200, json={"initialized": True, "sealed": False})

        if self.sealed:
            return httpx.Response(503, json={"errors": ["Vault is sealed"]})

        if request.headers.get("X-Vault-Token") != self.token:
            return httpx.Response(403, json={"errors": ["permission denied"]})

        if path == "/v1/auth/token/renew-self":
            if self.renew_fails:
                return httpx.Response(500, json={"errors": ["renewal failed"]})
            self.renewals += 1
            client_token = self.issue_token or self.token
            self.token = client_token
            return httpx.Response(200, json={"auth": {"client_token": client_token, "lease_duration": 3600}})

        if path == "/v1/auth/token/lookup-self":
            return httpx.Response(200, json={"data": {"ttl": 3600, "policies": ["auth-service"]}})

        prefix = f"/v1/{self.mount}/"
        if not path.startswith(prefix):
            return httpx.Response(404, json={"errors": []})

        kind, _, logical = path[len(prefix):].partition("/")
        if logical in self.failing_paths:
            return httpx.Response(500, json={"errors": ["internal error"]})

        if kind == "data":
            return self._handle_data(request, logical)
        if kind == "metadata":
            return self._handle_metadata(request, logical)
        return httpx.Response(404, json={"errors": []})

    def _handle_data(self, request: httpx.Request, logical: str) -> httpx.Response:
        if request.method == "GET":
            if logical not in self.secrets:
                return httpx.Response(404, json={"errors": []})
            return httpx.Response(200, json={
                "data": {
                    "data": self.secrets[logical],
                    "metadata": {"version": self.versions[logical], "destroyed": False}
                }
            })

        if request.method == "POST":
            self.secrets[logical] = json.loads(request.content)["data"]
            self.versions[logical] = self.versions.get(logical, 0) + 1
            return httpx.Response(200, json={"data": {"version": self.versions[logical]}})

        return httpx.Response(405, json={"errors": ["unsupported operation"]})

    def _handle_metadata(self, request: httpx.Request, logical: str) -> httpx.Response:
        if request.method == "DELETE":
            self.secrets.pop(logical, None)
            self.versions.pop(logical, None)
            return httpx.Response(204)

        if request.method == "LIST":
            prefix = f"{logical.rstrip('/')}/" if logical else ""
            children = set()
            for key in self.secrets:
                if key.startswith(prefix):
                    head, sep, _ = key[len(prefix):].partition("/")
                    children.add(head + sep)
            if not children:
                return httpx.Response(404, json={"errors": []})
            return httpx.Response(200, json={"data": {"keys": sorted(children)}})

        return httpx.Response(405, json={"errors": ["unsupported operation"]})


@pytest.fixture
def test_settings(monkeypatch) -> Settings:
    """Settings pointing at the fake Vault server."""
    for name in ("VAULT_ADDR", "VAULT_TOKEN", "VAULT_NAMESPACE", "SERVICE_NAME"):
        monkeypatch.delenv(name, raising=False)
    return Settings(
        environment="test",
        log_level="DEBUG",
        vault_addr=VAULT_ADDR,
        vault_token=VAULT_TOKEN,
        vault_request_timeout_ms=1000,
        vault_health_timeout_ms=500,
    )


@pytest.fixture
def fake_vault() -> FakeVaultServer:
    """Fake Vault server seeded with the auth-service secrets."""
    server = FakeVaultServer()
    server.secrets.update({
        "jwt/config": {"secret": "jwt-from-vault", "expires_in": "24h"},
        "auth-service/config": {"session_timeout": "3600", "max_login_attempts": 3, "lockout_duration": "600"},
        "auth-service/oauth": {
            "google_client_id": "client-id",
            "google_client_secret": "client-secret",
            "oauth_callback_url": "https://example.com/callback",
        },
        "redis/config": {"host": "cache.internal", "port": "6380", "password": "redis-pass"},
        "common/environment": {"node_env": "production"},
        "database/config": {"path": "/data/app.db"},
    })
    for key in server.secrets:
        server.versions[key] = 1
    return server


@pytest.fixture
def vault_mock(fake_vault: FakeVaultServer) -> Iterator[respx.MockRouter]:
    """Route all Vault HTTP traffic to the fake server."""
    with respx.mock(base_url=f"{VAULT_ADDR}/v1", assert_all_called=False) as router:
        router.route().mock(side_effect=fake_vault.handler)
        yield router


@pytest.fixture
async def transport() -> AsyncGenerator[VaultTransport, None]:
    """Vault transport against the fake server address."""
    vault_transport = VaultTransport(
        address=VAULT_ADDR,
        credential=VaultCredential(token=VAULT_TOKEN),
        timeout=1.0,
        health_timeout=0.5,
    )
    yield vault_transport
    await vault_transport.aclose()


@pytest.fixture
def accessor(transport: VaultTransport) -> SecretAccessor:
    """Secret accessor over the test transport."""
    return SecretAccessor(transport)


@pytest.fixture
async def fake_redis() -> AsyncGenerator[fakeredis.FakeRedis, None]:
    """Fake Redis for unit tests - fast and isolated."""
    fake_client = fakeredis.FakeRedis(decode_responses=True)
    yield fake_client
    await fake_client.flushall()
    await fake_client.aclose()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
