"""Value records consumed by the DASH manifest generator."""

from dataclasses import dataclass, field
from typing import List, Optional

DASH_STATIC_TYPE = "static"
DASH_PROFILE_ON_DEMAND = "urn:mpeg:dash:profile:isoff-on-demand:2011"
DEFAULT_MIN_BUFFER_TIME = "PT2S"
DEFAULT_VIDEO_MIME_TYPE = "video/mp4"
DEFAULT_AUDIO_MIME_TYPE = "audio/mp4"
DEFAULT_SUBTITLE_MIME_TYPE = "text/vtt"
SUBTITLE_BANDWIDTH = 256  # nominal, subtitles carry no real bitrate

SUBTITLE_KIND_MANUAL = "subtitles"
SUBTITLE_KIND_AUTO = "asr"


@dataclass(frozen=True)
class VideoRepresentation:
    """One video-only rendition."""

    id: str
    url: str
    codec: Optional[str]
    mime_type: str
    width: int
    height: int
    frame_rate: str
    bandwidth: int  # bits per second
    init_range: Optional[str] = None  # e.g., "0-740"
    index_range: Optional[str] = None  # e.g., "741-1048"
    format: Optional[str] = None  # e.g., "MP4"


@dataclass(frozen=True)
class AudioRepresentation:
    """One audio-only rendition."""

    id: str
    url: str
    codec: Optional[str]
    mime_type: str
    bandwidth: int
    audio_sampling_rate: str
    audio_channels: int = 2
    language: str = "und"
    language_name: str = "Unknown"
    init_range: Optional[str] = None
    index_range: Optional[str] = None
    format: Optional[str] = None


@dataclass(frozen=True)
class SubtitleRepresentation:
    """One subtitle track."""

    id: str
    url: str
    language: str
    language_name: str
    mime_type: str = DEFAULT_SUBTITLE_MIME_TYPE
    kind: str = SUBTITLE_KIND_MANUAL  # "subtitles" or "asr"
    bandwidth: int = SUBTITLE_BANDWIDTH
    format: Optional[str] = None  # e.g., "vtt"

    @property
    def auto_generated(self) -> bool:
        return self.kind == SUBTITLE_KIND_AUTO


@dataclass(frozen=True)
class ManifestConfig:
    """Everything needed to render one static MPD.

    The stream lists may be empty. ``None`` marks a list as absent, which the
    generator rejects.
    """

    duration_seconds: int
    media_presentation_duration: str
    video_streams: Optional[List[VideoRepresentation]] = field(default_factory=list)
    audio_streams: Optional[List[AudioRepresentation]] = field(default_factory=list)
    subtitle_streams: Optional[List[SubtitleRepresentation]] = field(default_factory=list)
    type: str = DASH_STATIC_TYPE
    min_buffer_time: str = DEFAULT_MIN_BUFFER_TIME
    profiles: str = DASH_PROFILE_ON_DEMAND
