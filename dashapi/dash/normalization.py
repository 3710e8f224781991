"""Normalization of raw yt-dlp format records into manifest value records.

yt-dlp reports formats as loosely typed dictionaries where any field may be
missing, ``None`` or a sentinel such as ``-1`` or ``"none"``. Each entry is
converted independently; an entry that cannot be converted is dropped from its
list without failing the rest of the batch.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar

import structlog

from dashapi.dash.duration import format_duration
from dashapi.dash.exceptions import InvalidManifestConfigError, NormalizationError
from dashapi.dash.languages import get_language_name, normalize_language_code
from dashapi.dash.models import (
    DEFAULT_AUDIO_MIME_TYPE,
    DEFAULT_SUBTITLE_MIME_TYPE,
    DEFAULT_VIDEO_MIME_TYPE,
    SUBTITLE_KIND_AUTO,
    SUBTITLE_KIND_MANUAL,
    AudioRepresentation,
    ManifestConfig,
    SubtitleRepresentation,
    VideoRepresentation,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

VIDEO_MIME_TYPES: Dict[str, str] = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "3gp": "video/3gpp",
}

AUDIO_MIME_TYPES: Dict[str, str] = {
    "m4a": "audio/mp4",
    "mp4": "audio/mp4",
    "webm": "audio/webm",
    "mp3": "audio/mpeg",
    "ogg": "audio/ogg",
}

SUBTITLE_MIME_TYPES: Dict[str, str] = {
    "vtt": "text/vtt",
    "ttml": "application/ttml+xml",
    "srv1": "text/xml",
    "srv2": "text/xml",
    "srv3": "text/xml",
    "json3": "application/json",
    "srt": "application/x-subrip",
}

# yt-dlp lists the live chat replay as a pseudo subtitle track
IGNORED_SUBTITLE_KEYS = frozenset({"live_chat"})


def _has_codec(value: Any) -> bool:
    return bool(value) and value != "none"


def _mime_type(raw: Mapping[str, Any], table: Dict[str, str], default: str) -> str:
    if raw.get("mime_type"):
        # yt-dlp/innertube style "video/mp4; codecs=..." -> "video/mp4"
        return str(raw["mime_type"]).split(";")[0].strip()
    ext = raw.get("ext")
    if isinstance(ext, str):
        return table.get(ext.lower(), default)
    return default


def _bandwidth(raw: Mapping[str, Any], *rate_keys: str) -> int:
    """Get bandwidth in bits per second.

    ``bitrate`` is already in bit/s; yt-dlp's ``tbr``/``vbr``/``abr`` are kbit/s.
    """
    bitrate = raw.get("bitrate")
    if bitrate is not None and bitrate > 0:
        return int(bitrate)

    for key in ("tbr", *rate_keys):
        value = raw.get(key)
        if value is not None and value > 0:
            return int(value * 1000)

    return 0


def _byte_range(value: Any) -> Optional[str]:
    """Convert a byte range to "start-end", or None when incomplete.

    Accepts "start-end" strings (yt-dlp ``streaming_options``) or mappings with
    ``start``/``end`` (innertube ``initRange``/``indexRange``).
    """
    if value is None:
        return None

    if isinstance(value, str):
        start_text, sep, end_text = value.partition("-")
        if not sep:
            return None
        start: Any = start_text
        end: Any = end_text
    elif isinstance(value, Mapping):
        start = value.get("start")
        end = value.get("end")
    else:
        return None

    try:
        start_int = int(start)
        end_int = int(end)
    except (TypeError, ValueError):
        return None

    if start_int >= 0 and end_int > 0:
        return f"{start_int}-{end_int}"
    return None


def _ranges(raw: Mapping[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    source: Mapping[str, Any] = raw.get("streaming_options") or raw
    return _byte_range(source.get("init_range")), _byte_range(source.get("index_range"))


def _format_label(raw: Mapping[str, Any]) -> Optional[str]:
    ext = raw.get("ext")
    if isinstance(ext, str) and ext and ext != "none":
        return ext.upper()
    return None


def _frame_rate(fps: Any) -> str:
    if fps is None:
        return ""
    value = float(fps)
    if value <= 0:
        return ""
    if value.is_integer():
        return str(int(value))
    return str(value)


def _require_mapping(raw: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"{kind} stream must be a mapping, got {type(raw).__name__}")
    return raw


def _require_url(raw: Mapping[str, Any], kind: str) -> str:
    url = raw.get("url")
    if not url or not isinstance(url, str):
        raise NormalizationError(f"{kind} stream has no URL")
    return url


def normalize_video_stream(raw: Any, index: int) -> VideoRepresentation:
    """
    Convert one raw video-only format into a VideoRepresentation.

    Args:
        raw: yt-dlp format dictionary
        index: 1-based position in the raw list, used for the identifier

    Returns:
        Normalized video representation

    Raises:
        NormalizationError: If the entry lacks a URL or a positive bandwidth
    """
    raw = _require_mapping(raw, "Video")
    url = _require_url(raw, "Video")

    bandwidth = _bandwidth(raw, "vbr")
    if bandwidth < 1:
        raise NormalizationError(f"Video stream {raw.get('format_id')} has no usable bandwidth")

    init_range, index_range = _ranges(raw)

    return VideoRepresentation(
        id=f"video-{index}",
        url=url,
        codec=raw["vcodec"] if _has_codec(raw.get("vcodec")) else None,
        mime_type=_mime_type(raw, VIDEO_MIME_TYPES, DEFAULT_VIDEO_MIME_TYPE),
        width=int(raw.get("width") or 0),
        height=int(raw.get("height") or 0),
        frame_rate=_frame_rate(raw.get("fps")),
        bandwidth=bandwidth,
        init_range=init_range,
        index_range=index_range,
        format=_format_label(raw),
    )


def normalize_audio_stream(raw: Any, index: int) -> AudioRepresentation:
    """
    Convert one raw audio-only format into an AudioRepresentation.

    Args:
        raw: yt-dlp format dictionary
        index: 1-based position in the raw list, used for the identifier

    Returns:
        Normalized audio representation

    Raises:
        NormalizationError: If the entry lacks a URL or a positive bandwidth
    """
    raw = _require_mapping(raw, "Audio")
    url = _require_url(raw, "Audio")

    bandwidth = _bandwidth(raw, "abr")
    if bandwidth < 1:
        raise NormalizationError(f"Audio stream {raw.get('format_id')} has no usable bandwidth")

    channels = int(raw.get("audio_channels") or 0)
    language = normalize_language_code(raw.get("language"))
    sample_rate = int(raw.get("asr") or 0)
    init_range, index_range = _ranges(raw)

    return AudioRepresentation(
        id=f"audio-{index}",
        url=url,
        codec=raw["acodec"] if _has_codec(raw.get("acodec")) else None,
        mime_type=_mime_type(raw, AUDIO_MIME_TYPES, DEFAULT_AUDIO_MIME_TYPE),
        bandwidth=bandwidth,
        audio_sampling_rate=str(sample_rate) if sample_rate > 0 else "",
        audio_channels=channels if channels > 0 else 2,
        language=language,
        language_name=get_language_name(language),
        init_range=init_range,
        index_range=index_range,
        format=_format_label(raw),
    )


def normalize_subtitle_stream(raw: Any, index: int) -> SubtitleRepresentation:
    """
    Convert one flattened subtitle entry into a SubtitleRepresentation.

    Args:
        raw: Mapping with ``language``, ``url``, ``ext``, optional ``name``
            and ``auto_generated`` (see ``flatten_subtitles``)
        index: 1-based position in the raw list, used for the identifier

    Returns:
        Normalized subtitle representation

    Raises:
        NormalizationError: If the entry lacks a URL
    """
    raw = _require_mapping(raw, "Subtitle")
    url = _require_url(raw, "Subtitle")

    language = normalize_language_code(raw.get("language"))
    ext = raw.get("ext") if isinstance(raw.get("ext"), str) else None

    return SubtitleRepresentation(
        id=f"subtitle-{index}",
        url=url,
        language=language,
        language_name=raw.get("name") or get_language_name(language),
        mime_type=_mime_type(raw, SUBTITLE_MIME_TYPES, DEFAULT_SUBTITLE_MIME_TYPE),
        kind=SUBTITLE_KIND_AUTO if raw.get("auto_generated") else SUBTITLE_KIND_MANUAL,
        format=ext.lower() if ext else None,
    )


def try_normalize(
    normalizer: Callable[[Any, int], T], raw: Any, index: int, kind: str
) -> Optional[T]:
    """
    Attempt to normalize one entry.

    Returns:
        The normalized record, or None when the entry is malformed
    """
    try:
        return normalizer(raw, index)
    except Exception as e:
        logger.debug("Skipping malformed stream", kind=kind, index=index, error=str(e))
        return None


def normalize_streams(
    raw_streams: Optional[Iterable[Any]],
    normalizer: Callable[[Any, int], T],
    kind: str,
) -> List[T]:
    """
    Normalize a batch of raw entries, dropping the ones that fail.

    Args:
        raw_streams: Raw entries in source order (None is treated as empty)
        normalizer: Per-entry conversion function
        kind: Stream kind for logging ("video", "audio", "subtitle")

    Returns:
        Normalized records in source order
    """
    if raw_streams is None:
        return []

    attempts = [
        try_normalize(normalizer, raw, index, kind)
        for index, raw in enumerate(raw_streams, start=1)
    ]
    normalized = [item for item in attempts if item is not None]

    skipped = len(attempts) - len(normalized)
    if skipped:
        logger.warning(
            "Skipped malformed streams",
            kind=kind,
            skipped=skipped,
            kept=len(normalized),
        )

    return normalized


def split_formats(formats: Optional[Iterable[Any]]) -> Tuple[List[Any], List[Any]]:
    """
    Split yt-dlp formats into video-only and audio-only lists.

    Muxed formats, storyboards and non-HTTP protocols (HLS, DASH fragments)
    are not single-file representations and are left out.

    Args:
        formats: ``formats`` list from yt-dlp output

    Returns:
        Tuple of (video_only, audio_only) raw entries in source order
    """
    video_only: List[Any] = []
    audio_only: List[Any] = []

    for fmt in formats or []:
        if not isinstance(fmt, Mapping):
            continue

        protocol = fmt.get("protocol")
        if protocol and protocol not in ("http", "https"):
            continue

        has_video = _has_codec(fmt.get("vcodec"))
        has_audio = _has_codec(fmt.get("acodec"))

        if has_video and not has_audio:
            video_only.append(fmt)
        elif has_audio and not has_video:
            audio_only.append(fmt)

    return video_only, audio_only


def flatten_subtitles(
    subtitles: Optional[Mapping[str, Any]],
    automatic_captions: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Flatten yt-dlp subtitle maps into one entry per track file.

    Args:
        subtitles: ``subtitles`` mapping (language -> list of tracks)
        automatic_captions: ``automatic_captions`` mapping of the same shape

    Returns:
        List of dicts with language, url, ext, name and auto_generated
    """
    entries: List[Dict[str, Any]] = []

    for source, auto_generated in ((subtitles, False), (automatic_captions, True)):
        for language, tracks in (source or {}).items():
            if language in IGNORED_SUBTITLE_KEYS:
                continue
            for track in tracks or []:
                if not isinstance(track, Mapping):
                    continue
                entries.append(
                    {
                        "language": language,
                        "url": track.get("url"),
                        "ext": track.get("ext"),
                        "name": track.get("name"),
                        "auto_generated": auto_generated,
                    }
                )

    return entries


def build_manifest_config(info: Optional[Mapping[str, Any]]) -> ManifestConfig:
    """
    Build a ManifestConfig from a yt-dlp info dictionary.

    Every stream is normalized independently; malformed streams are skipped.
    The returned config is not validated here, the generator does that.

    Args:
        info: yt-dlp ``--dump-json`` output

    Returns:
        Manifest configuration holding all normalized streams

    Raises:
        InvalidManifestConfigError: If info is None
    """
    if info is None:
        raise InvalidManifestConfigError("Stream info cannot be None")

    duration = info.get("duration") or 0
    # Non-finite durations become 0 and are rejected by the generator
    duration_seconds = int(duration) if math.isfinite(duration) else 0

    raw_video, raw_audio = split_formats(info.get("formats"))
    raw_subtitles = flatten_subtitles(info.get("subtitles"), info.get("automatic_captions"))

    config = ManifestConfig(
        duration_seconds=duration_seconds,
        media_presentation_duration=format_duration(duration_seconds),
        video_streams=normalize_streams(raw_video, normalize_video_stream, "video"),
        audio_streams=normalize_streams(raw_audio, normalize_audio_stream, "audio"),
        subtitle_streams=normalize_streams(raw_subtitles, normalize_subtitle_stream, "subtitle"),
    )

    logger.debug(
        "Manifest config built",
        video_id=info.get("id"),
        duration_seconds=duration_seconds,
        video_streams=len(config.video_streams or []),
        audio_streams=len(config.audio_streams or []),
        subtitle_streams=len(config.subtitle_streams or []),
    )

    return config
