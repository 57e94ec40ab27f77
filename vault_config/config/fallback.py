"""Environment-derived fallback configuration."""

import os
from typing import Mapping, Optional

import structlog

from .models import (
    DEFAULT_LOCKOUT_DURATION,
    DEFAULT_MAX_LOGIN_ATTEMPTS,
    DEFAULT_REDIS_PORT,
    DEFAULT_SESSION_TIMEOUT,
    SOURCE_FALLBACK,
    ServiceConfig,
    parse_number,
)

logger = structlog.get_logger("config.fallback")

DEFAULT_JWT_SECRET = "fallback-secret-change-me"
DEFAULT_REDIS_HOST = "redis"


class FallbackResolver:
    """Builds a ServiceConfig from process environment variables only."""

    def resolve(self, environ: Optional[Mapping[str, str]] = None) -> ServiceConfig:
        """Resolve the fallback configuration. Never performs network I/O."""
        env = os.environ if environ is None else environ

        logger.warning("Using fallback configuration from environment variables")

        return ServiceConfig(
            jwt_secret=env.get("JWT_SECRET") or DEFAULT_JWT_SECRET,
            session_timeout=parse_number(env.get("SESSION_TIMEOUT"), DEFAULT_SESSION_TIMEOUT),
            max_login_attempts=parse_number(env.get("MAX_LOGIN_ATTEMPTS"), DEFAULT_MAX_LOGIN_ATTEMPTS),
            lockout_duration=parse_number(env.get("LOCKOUT_DURATION"), DEFAULT_LOCKOUT_DURATION),
            google_client_id=env.get("GOOGLE_CLIENT_ID") or "",
            google_client_secret=env.get("GOOGLE_CLIENT_SECRET") or "",
            oauth_callback_url=env.get("OAUTH_CALLBACK_URL") or "",
            redis_host=env.get("REDIS_HOST") or DEFAULT_REDIS_HOST,
            redis_port=parse_number(env.get("REDIS_PORT"), DEFAULT_REDIS_PORT),
            redis_password=env.get("REDIS_PASSWORD") or "",
            source=SOURCE_FALLBACK,
        )
