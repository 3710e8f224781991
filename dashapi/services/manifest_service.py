"""DASH manifest service.

Turns yt-dlp stream info into an MPD document: normalization, optional stream
selection, then XML generation. Each call is an independent, synchronous
computation over its own data.
"""

from dataclasses import replace
from typing import Any, Mapping, Optional

import structlog

from dashapi.dash.generator import generate_manifest_xml
from dashapi.dash.models import ManifestConfig
from dashapi.dash.normalization import build_manifest_config
from dashapi.dash.selection import select_audio_streams, select_subtitles, select_video_streams

logger = structlog.get_logger(__name__)

DASH_CONTENT_TYPE = "application/dash+xml"


class ManifestService:
    """Generates DASH manifests from extractor output."""

    def __init__(self, select_streams: bool = True, min_buffer_time: Optional[str] = None):
        """
        Initialize manifest service.

        Args:
            select_streams: Whether to reduce each stream kind to a bounded subset
                before generation. When False every normalized stream is listed.
            min_buffer_time: Optional override for the MPD minBufferTime
        """
        self.select_streams = select_streams
        self.min_buffer_time = min_buffer_time

    def normalize(self, info: Optional[Mapping[str, Any]]) -> ManifestConfig:
        """Normalize every stream in the info dictionary, without selection."""
        return build_manifest_config(info)

    def build_config(self, info: Optional[Mapping[str, Any]]) -> ManifestConfig:
        """
        Build the manifest configuration for a video.

        Args:
            info: yt-dlp info dictionary

        Returns:
            Configuration with normalized (and optionally selected) streams

        Raises:
            InvalidManifestConfigError: If info is None
        """
        config = self.normalize(info)

        if self.select_streams:
            config = replace(
                config,
                video_streams=select_video_streams(config.video_streams or []),
                audio_streams=select_audio_streams(config.audio_streams or []),
                subtitle_streams=select_subtitles(config.subtitle_streams or []),
            )

        if self.min_buffer_time:
            config = replace(config, min_buffer_time=self.min_buffer_time)

        return config

    def generate_manifest(self, info: Optional[Mapping[str, Any]]) -> str:
        """
        Generate a complete DASH manifest for a video.

        Args:
            info: yt-dlp info dictionary

        Returns:
            MPD XML document

        Raises:
            InvalidManifestConfigError: If info is None or the resulting
                configuration is invalid (e.g., zero duration)
        """
        video_id = info.get("id") if info is not None else None
        logger.info("Generating DASH manifest", video_id=video_id)

        config = self.build_config(info)
        manifest = generate_manifest_xml(config)

        logger.info(
            "DASH manifest generated",
            video_id=video_id,
            video_streams=len(config.video_streams or []),
            audio_streams=len(config.audio_streams or []),
            subtitle_streams=len(config.subtitle_streams or []),
            size=len(manifest),
        )

        return manifest


# Global manifest service instance
_manifest_service: Optional[ManifestService] = None


def configure_manifest_service(
    select_streams: bool = True, min_buffer_time: Optional[str] = None
) -> ManifestService:
    """Configure and initialize the global manifest service.

    Args:
        select_streams: Whether stream selection is applied.
        min_buffer_time: Optional minBufferTime override.

    Returns:
        Configured ManifestService instance.
    """
    global _manifest_service
    _manifest_service = ManifestService(
        select_streams=select_streams,
        min_buffer_time=min_buffer_time,
    )
    return _manifest_service


def get_manifest_service() -> ManifestService:
    """Get the global manifest service instance.

    Returns:
        The configured ManifestService.

    Raises:
        RuntimeError: If manifest service is not configured.
    """
    if _manifest_service is None:
        raise RuntimeError(
            "Manifest service not configured. Call configure_manifest_service() first."
        )
    return _manifest_service
