"""HTTP API module."""

from .routes import router

__all__ = ["router"]
