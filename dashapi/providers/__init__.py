"""Video provider implementations."""

from dashapi.providers.base import VideoProvider
from dashapi.providers.exceptions import (
    ExtractionError,
    InvalidURLError,
    ProviderError,
    VideoUnavailableError,
)
from dashapi.providers.manager import ProviderManager
from dashapi.providers.youtube import YouTubeProvider

__all__ = [
    "VideoProvider",
    "ProviderManager",
    "YouTubeProvider",
    "ProviderError",
    "InvalidURLError",
    "VideoUnavailableError",
    "ExtractionError",
]
