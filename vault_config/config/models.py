"""Composed service configuration built from Vault secrets."""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

SOURCE_VAULT = "vault"
SOURCE_FALLBACK = "fallback"

DEFAULT_SESSION_TIMEOUT = 1800
DEFAULT_MAX_LOGIN_ATTEMPTS = 5
DEFAULT_LOCKOUT_DURATION = 900
DEFAULT_REDIS_PORT = 6379


def text_value(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    """Read a string setting, treating null the same as a missing key."""
    value = payload.get(key)
    return default if value is None else str(value)


def parse_number(value: Any, default: int) -> int:
    """Parse a numeric setting, falling back to the default when absent, invalid or zero."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return default
    return number or default


@dataclass(frozen=True)
class ServiceConfig:
    """Configuration consumed by the auth service."""
    jwt_secret: str = field(repr=False)
    session_timeout: int = DEFAULT_SESSION_TIMEOUT
    max_login_attempts: int = DEFAULT_MAX_LOGIN_ATTEMPTS
    lockout_duration: int = DEFAULT_LOCKOUT_DURATION
    google_client_id: str = ""
    google_client_secret: str = field(default="", repr=False)
    oauth_callback_url: str = ""
    redis_host: str = "redis"
    redis_port: int = DEFAULT_REDIS_PORT
    redis_password: str = field(default="", repr=False)
    source: str = SOURCE_VAULT

    @classmethod
    def from_secrets(
        cls,
        jwt_config: Mapping[str, Any],
        service_config: Mapping[str, Any],
        oauth_config: Mapping[str, Any],
        redis_config: Mapping[str, Any],
    ) -> "ServiceConfig":
        """Compose a configuration from the four secret payloads."""
        return cls(
            jwt_secret=text_value(jwt_config, "secret"),
            session_timeout=parse_number(service_config.get("session_timeout"), DEFAULT_SESSION_TIMEOUT),
            max_login_attempts=parse_number(service_config.get("max_login_attempts"), DEFAULT_MAX_LOGIN_ATTEMPTS),
            lockout_duration=parse_number(service_config.get("lockout_duration"), DEFAULT_LOCKOUT_DURATION),
            google_client_id=text_value(oauth_config, "google_client_id"),
            google_client_secret=text_value(oauth_config, "google_client_secret"),
            oauth_callback_url=text_value(oauth_config, "oauth_callback_url"),
            redis_host=text_value(redis_config, "host", "redis"),
            redis_port=parse_number(redis_config.get("port"), DEFAULT_REDIS_PORT),
            redis_password=text_value(redis_config, "password"),
            source=SOURCE_VAULT,
        )

    @classmethod
    def field_names(cls) -> list[str]:
        """Names of all configuration fields."""
        return [f.name for f in fields(cls)]

    @property
    def is_fallback(self) -> bool:
        """Check if this configuration came from the environment fallback."""
        return self.source == SOURCE_FALLBACK

    def get(self, key: str) -> Any:
        """Project a single field by name."""
        if key not in self.field_names():
            raise KeyError(key)
        return getattr(self, key)

    def get_redis_config(self) -> dict:
        """Get Redis connection keyword arguments."""
        return {
            "host": self.redis_host,
            "port": self.redis_port,
            "password": self.redis_password or None,
            "decode_responses": True,
            "encoding": "utf-8",
        }
