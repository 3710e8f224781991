"""DASH manifest pipeline: normalization, stream selection and MPD generation."""

from dashapi.dash.duration import format_duration
from dashapi.dash.exceptions import (
    InvalidManifestConfigError,
    ManifestError,
    NormalizationError,
)
from dashapi.dash.generator import generate_manifest_xml, validate_config
from dashapi.dash.models import (
    AudioRepresentation,
    ManifestConfig,
    SubtitleRepresentation,
    VideoRepresentation,
)
from dashapi.dash.normalization import build_manifest_config
from dashapi.dash.selection import select_audio_streams, select_subtitles, select_video_streams

__all__ = [
    "AudioRepresentation",
    "ManifestConfig",
    "SubtitleRepresentation",
    "VideoRepresentation",
    "ManifestError",
    "InvalidManifestConfigError",
    "NormalizationError",
    "build_manifest_config",
    "format_duration",
    "generate_manifest_xml",
    "validate_config",
    "select_video_streams",
    "select_audio_streams",
    "select_subtitles",
]
