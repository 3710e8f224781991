"""Request and response schemas for API endpoints.

This module provides Pydantic models for response serialization with
OpenAPI examples.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoStreamResponse(BaseModel):
    """Normalized video-only rendition."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., examples=["video-1"])
    url: str = Field(..., examples=["https://rr1---sn-example.googlevideo.com/videoplayback?itag=137"])
    codec: Optional[str] = Field(None, examples=["avc1.640028"])
    mime_type: str = Field(..., examples=["video/mp4"])
    width: int = Field(..., examples=[1920])
    height: int = Field(..., examples=[1080])
    frame_rate: str = Field("", examples=["30"])
    bandwidth: int = Field(..., description="Bits per second", examples=[4500000])
    init_range: Optional[str] = Field(None, examples=["0-740"])
    index_range: Optional[str] = Field(None, examples=["741-1048"])
    format: Optional[str] = Field(None, examples=["MP4"])


class AudioStreamResponse(BaseModel):
    """Normalized audio-only rendition."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., examples=["audio-1"])
    url: str
    codec: Optional[str] = Field(None, examples=["mp4a.40.2"])
    mime_type: str = Field(..., examples=["audio/mp4"])
    bandwidth: int = Field(..., examples=[128000])
    audio_sampling_rate: str = Field("", examples=["44100"])
    audio_channels: int = Field(2, examples=[2])
    language: str = Field("und", examples=["en"])
    language_name: str = Field("Unknown", examples=["English"])
    init_range: Optional[str] = None
    index_range: Optional[str] = None
    format: Optional[str] = Field(None, examples=["M4A"])


class SubtitleStreamResponse(BaseModel):
    """Normalized subtitle track."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., examples=["subtitle-1"])
    url: str
    language: str = Field(..., examples=["en"])
    language_name: str = Field(..., examples=["English"])
    mime_type: str = Field(..., examples=["text/vtt"])
    kind: Literal["subtitles", "asr"] = Field("subtitles", examples=["subtitles"])
    auto_generated: bool = Field(False, examples=[False])
    format: Optional[str] = Field(None, examples=["vtt"])


class StreamInfoResponse(BaseModel):
    """Stream summary: metadata plus every normalized rendition."""

    video_id: str = Field(..., examples=["dQw4w9WgXcQ"])
    title: str = Field("", examples=["Rick Astley - Never Gonna Give You Up"])
    duration: int = Field(..., description="Duration in seconds", examples=[212])
    media_presentation_duration: str = Field(..., examples=["PT3M32S"])
    uploader: str = Field("", examples=["Rick Astley"])
    video_streams: List[VideoStreamResponse] = Field(default_factory=list)
    audio_streams: List[AudioStreamResponse] = Field(default_factory=list)
    subtitle_streams: List[SubtitleStreamResponse] = Field(default_factory=list)


class StreamDetailsResponse(BaseModel):
    """Descriptive video metadata."""

    video_id: str = Field(..., examples=["dQw4w9WgXcQ"])
    title: str = Field("", examples=["Rick Astley - Never Gonna Give You Up"])
    description: str = Field("", examples=["The official video for Never Gonna Give You Up"])
    uploader: str = Field("", examples=["Rick Astley"])
    channel_id: Optional[str] = Field(None, examples=["UCuAXFkgsw1L7xaCfnd5JJOw"])
    channel_follower_count: Optional[int] = Field(None, examples=[4100000])
    view_count: int = Field(0, examples=[1500000000])
    like_count: int = Field(0, examples=[17000000])
    upload_date: str = Field("", examples=["20091025"])
    thumbnail_url: str = Field("", examples=["https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"])
    duration: int = Field(0, examples=[212])


class StreamSegmentResponse(BaseModel):
    """A chapter of the video."""

    title: str = Field(..., examples=["Intro"])
    start_time: float = Field(..., description="Start offset in seconds", examples=[0.0])
    end_time: Optional[float] = Field(None, description="End offset in seconds", examples=[42.0])


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    status: Literal["healthy", "unhealthy"] = Field(..., examples=["healthy"])
    version: Optional[str] = Field(default=None, examples=["2024.12.01"])
    details: Optional[Dict[str, Any]] = Field(default=None, examples=[{"youtube": True}])


class HealthResponse(BaseModel):
    """Detailed health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., examples=["healthy"])
    timestamp: str = Field(..., examples=["2025-12-25T10:30:00Z"])
    version: str = Field(..., examples=["1.0.0"])
    uptime_seconds: float = Field(..., examples=[3600.5])
    components: Dict[str, ComponentHealth]


class LivenessResponse(BaseModel):
    """Simple liveness check response for container orchestration."""

    status: Literal["alive"] = Field(..., examples=["alive"])


class ReadinessResponse(BaseModel):
    """Readiness check response for load balancer integration."""

    status: Literal["ready", "not_ready"] = Field(..., examples=["ready"])
    ready: bool = Field(..., examples=[True])
    message: Optional[str] = Field(default=None, examples=["yt-dlp not available"])


class ErrorDetail(BaseModel):
    """Structured error response.

    All API errors follow this format with machine-readable error codes
    and optional suggestions for resolution.
    """

    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["INVALID_URL", "VIDEO_UNAVAILABLE", "INVALID_MANIFEST_CONFIG"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid video ID. Expected 11 characters of letters, digits, '-' or '_'"],
    )
    details: Optional[str] = Field(None, description="Additional error context")
    timestamp: str = Field(..., examples=["2025-12-25T10:30:00Z"])
    request_id: Optional[str] = Field(
        None,
        description="Request ID for tracing",
        examples=["req_550e8400e29b"],
    )
    suggestion: Optional[str] = Field(
        None,
        description="Suggested action to resolve the error",
        examples=["Pass an 11-character YouTube video ID or a youtube.com / youtu.be URL"],
    )
