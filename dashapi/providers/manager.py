"""Provider manager for registration and selection."""

from typing import Dict, Optional

import structlog

from dashapi.providers.base import VideoProvider
from dashapi.providers.exceptions import InvalidURLError

logger = structlog.get_logger(__name__)


class ProviderManager:
    """Manages video provider registration and selection."""

    def __init__(self) -> None:
        self._providers: Dict[str, VideoProvider] = {}
        self._enabled_providers: Dict[str, bool] = {}
        self._default_provider: Optional[str] = None

    def register_provider(
        self, name: str, provider: VideoProvider, enabled: bool = True, default: bool = False
    ) -> None:
        """
        Register a video provider.

        Args:
            name: Provider name (e.g., "youtube")
            provider: Provider instance
            enabled: Whether provider is enabled
            default: Whether bare video IDs resolve to this provider
        """
        self._providers[name] = provider
        self._enabled_providers[name] = enabled
        if default or self._default_provider is None:
            self._default_provider = name

        logger.info("Provider registered", provider=name, enabled=enabled, default=default)

    def is_provider_enabled(self, name: str) -> bool:
        return self._enabled_providers.get(name, False)

    def get_provider_for_url(self, url: str) -> VideoProvider:
        """
        Select appropriate provider based on URL.

        Args:
            url: Video URL

        Returns:
            Provider instance that can handle the URL

        Raises:
            InvalidURLError: If no provider can handle the URL
        """
        for name, provider in self._providers.items():
            if not self._enabled_providers.get(name, False):
                continue

            try:
                if provider.validate_url(url):
                    logger.debug("Provider selected for URL", provider=name, url=url)
                    return provider
            except Exception as e:
                # One provider's validation failure must not block the others
                logger.warning("Provider validation error", provider=name, url=url, error=str(e))
                continue

        raise InvalidURLError(
            f"No provider available for URL: {url}. "
            "Ensure the URL is from a supported platform and the provider is enabled."
        )

    def get_default_provider(self) -> VideoProvider:
        """
        Get the provider used to resolve bare video IDs.

        Raises:
            InvalidURLError: If no enabled default provider is registered
        """
        name = self._default_provider
        if name is None or not self._enabled_providers.get(name, False):
            raise InvalidURLError("No provider available for video IDs")
        return self._providers[name]

    def resolve_url(self, video_id: str) -> str:
        """
        Turn a bare video ID or a full URL into a provider watch URL.

        Args:
            video_id: Video ID or URL

        Returns:
            Watch URL accepted by a registered provider

        Raises:
            InvalidURLError: If the value is neither a supported URL nor a valid ID
        """
        if "/" in video_id or "." in video_id:
            self.get_provider_for_url(video_id)
            return video_id
        return self.get_default_provider().build_url(video_id)

    async def get_stream_info(self, video_id: str) -> Dict:
        """
        Resolve a video ID or URL and extract its stream info.

        Raises:
            InvalidURLError: If the ID or URL is invalid
            VideoUnavailableError: If the video is not accessible
            ExtractionError: If extraction fails
        """
        url = self.resolve_url(video_id)
        provider = self.get_provider_for_url(url)
        return await provider.get_stream_info(url)

    def get_provider_by_name(self, name: str) -> Optional[VideoProvider]:
        return self._providers.get(name)

    def list_providers(self) -> Dict[str, bool]:
        """
        List all registered providers and their status.

        Returns:
            Dictionary mapping provider names to enabled status
        """
        return {name: self._enabled_providers.get(name, False) for name in self._providers.keys()}
