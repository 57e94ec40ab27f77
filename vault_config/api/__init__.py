"""HTTP API routes."""

from .health import router

__all__ = ["router"]
