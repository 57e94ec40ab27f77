"""Exceptions raised by the Vault client."""


class VaultError(Exception):
    """Base exception for Vault client errors."""


class VaultConfigurationError(VaultError):
    """Raised when the client cannot be constructed from its settings."""


class TransportError(VaultError):
    """HTTP or network level failure talking to Vault."""

    def __init__(self, message: str, status: int | None = None, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.path = path

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (status: {self.status}, path: {self.path})"
        return f"{self.message} (path: {self.path})"


class SecretError(VaultError):
    """Base exception for secret accessor errors."""

    def __init__(self, message: str, path: str, transport_error: TransportError | None = None):
        super().__init__(message)
        self.path = path
        self.transport_error = transport_error

    @property
    def status(self) -> int | None:
        """HTTP status of the underlying transport failure, if any."""
        return self.transport_error.status if self.transport_error else None


class SecretReadError(SecretError):
    """Failed to read a secret."""
    pass


class SecretNotFoundError(SecretReadError):
    """Secret does not exist or holds no payload."""
    pass


class SecretWriteError(SecretError):
    """Failed to write a secret."""
    pass


class SecretDeleteError(SecretError):
    """Failed to delete a secret."""
    pass


class SecretListError(SecretError):
    """Failed to list secrets."""
    pass
