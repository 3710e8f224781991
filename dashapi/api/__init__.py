"""API endpoints."""

from dashapi.api import health, streams

__all__ = [
    "health",
    "streams",
]
