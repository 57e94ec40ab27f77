"""Vault secret transport, access and token renewal."""

from .accessor import SecretAccessor, normalize_path
from .renewal import TokenRenewer
from .transport import VaultCredential, VaultTransport

__all__ = ["SecretAccessor", "normalize_path", "TokenRenewer", "VaultCredential", "VaultTransport"]
