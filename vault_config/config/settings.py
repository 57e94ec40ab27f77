"""Application configuration and settings using Pydantic Settings."""


from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Vault client settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = "Vault Config Service"
    version: str = "1.0.0"
    environment: str = Field(default="development", description="Environment: development, staging, production")
    log_level: str = Field(default="INFO", description="Logging level")
    structured_logging: bool = Field(default=True, description="Enable structured (JSON) logging")

    # Server Settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Vault Connection
    vault_addr: str = Field(default="http://vault:8200", description="Vault server address")
    vault_token: str | None = Field(default=None, description="Vault bearer token")
    vault_namespace: str | None = Field(default=None, description="Vault namespace header")
    vault_mount: str = Field(default="secret", description="KV v2 mount name")
    vault_request_timeout_ms: int = Field(default=5000, description="Timeout for Vault API calls (ms)")
    vault_health_timeout_ms: int = Field(default=3000, description="Timeout for Vault health checks (ms)")
    vault_token_renew_interval_minutes: float = Field(
        default=50, description="Interval between token self-renewals (minutes)"
    )

    # Configuration Cache
    service_name: str = Field(default="auth-service", description="Service whose secrets are composed")
    config_cache_seconds: float = Field(default=300, description="Composed configuration cache window (seconds)")

    @validator("environment")
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        allowed = ["development", "test", "staging", "production"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level setting."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @validator("vault_addr")
    def validate_vault_addr(cls, v: str) -> str:
        """Strip trailing slashes from the Vault address."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Vault address must start with http:// or https://")
        return v.rstrip("/")

    @validator(
        "vault_request_timeout_ms",
        "vault_health_timeout_ms",
        "vault_token_renew_interval_minutes",
        "config_cache_seconds",
    )
    def validate_positive(cls, v: float) -> float:
        """Validate durations are positive."""
        if v <= 0:
            raise ValueError("Durations must be greater than zero")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def request_timeout(self) -> float:
        """Vault request timeout in seconds."""
        return self.vault_request_timeout_ms / 1000

    @property
    def health_timeout(self) -> float:
        """Vault health check timeout in seconds."""
        return self.vault_health_timeout_ms / 1000

    @property
    def renew_interval(self) -> float:
        """Token renewal interval in seconds."""
        return self.vault_token_renew_interval_minutes * 60


# Global settings instance
settings = Settings()
