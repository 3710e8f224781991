"""Abstract base class for video providers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class VideoProvider(ABC):
    """Abstract base class for video platform providers."""

    @abstractmethod
    def validate_url(self, url: str) -> bool:
        """
        Validate if URL belongs to this provider.

        Args:
            url: Video URL to validate

        Returns:
            True if URL is valid for this provider, False otherwise
        """
        pass

    @abstractmethod
    def build_url(self, video_id: str) -> str:
        """
        Build the canonical watch URL for a video ID.

        Args:
            video_id: Provider-specific video identifier

        Returns:
            Watch URL

        Raises:
            InvalidURLError: If the video ID is malformed
        """
        pass

    @abstractmethod
    def extract_video_id(self, url: str) -> Optional[str]:
        """
        Extract the video ID from a URL.

        Args:
            url: Video URL

        Returns:
            Video ID if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_stream_info(self, url: str) -> Dict[str, Any]:
        """
        Extract raw stream information (formats, subtitles, chapters, metadata).

        Args:
            url: Video URL

        Returns:
            Extractor output as a dictionary

        Raises:
            InvalidURLError: If URL is invalid
            VideoUnavailableError: If video is not accessible
            ExtractionError: If extraction fails
        """
        pass
