"""Vault-backed configuration client."""

from .client import VaultClient
from .config.models import ServiceConfig
from .secrets.exceptions import (
    SecretDeleteError,
    SecretError,
    SecretListError,
    SecretNotFoundError,
    SecretReadError,
    SecretWriteError,
    TransportError,
    VaultConfigurationError,
    VaultError,
)

__all__ = [
    "VaultClient",
    "ServiceConfig",
    "VaultError",
    "VaultConfigurationError",
    "TransportError",
    "SecretError",
    "SecretReadError",
    "SecretNotFoundError",
    "SecretWriteError",
    "SecretDeleteError",
    "SecretListError",
]
