"""MPEG-DASH MPD generation.

Builds a static, on-demand MPD from a ManifestConfig. The whole element tree is
assembled in memory and serialized once, so a call returns either a complete
document or raises.
"""

import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Sequence

import structlog

from dashapi.dash.exceptions import InvalidManifestConfigError
from dashapi.dash.languages import UNDEFINED_LANGUAGE, get_language_name
from dashapi.dash.models import (
    DEFAULT_AUDIO_MIME_TYPE,
    DEFAULT_VIDEO_MIME_TYPE,
    AudioRepresentation,
    ManifestConfig,
    SubtitleRepresentation,
    VideoRepresentation,
)

logger = structlog.get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
DASH_NAMESPACE = "urn:mpeg:dash:schema:mpd:2011"
AUDIO_CHANNEL_SCHEME = "urn:mpeg:dash:23003:3:audio_channel_configuration:2011"
ROLE_SCHEME = "urn:mpeg:dash:role:2011"
SUBTITLE_ROLE = "subtitles"

VIDEO_ADAPTATION_SET_ID = 0
FIRST_AUDIO_ADAPTATION_SET_ID = 1
FIRST_SUBTITLE_ADAPTATION_SET_ID = 100

INDENT = "  "


def validate_config(config: Optional[ManifestConfig]) -> ManifestConfig:
    """
    Validate a manifest configuration.

    Args:
        config: Configuration to validate

    Returns:
        The same configuration

    Raises:
        InvalidManifestConfigError: If the config is missing, its duration is
            not positive, a stream list is absent or a bandwidth is below 1
    """
    if config is None:
        raise InvalidManifestConfigError("Manifest configuration cannot be None")

    if config.duration_seconds <= 0:
        raise InvalidManifestConfigError("Duration must be greater than 0")

    if (
        config.video_streams is None
        or config.audio_streams is None
        or config.subtitle_streams is None
    ):
        raise InvalidManifestConfigError("Stream lists cannot be None")

    for stream in [*config.video_streams, *config.audio_streams, *config.subtitle_streams]:
        if stream.bandwidth < 1:
            raise InvalidManifestConfigError(
                f"Representation {stream.id} has non-positive bandwidth {stream.bandwidth}"
            )

    logger.debug("Manifest configuration validated")
    return config


def _first_mime_type(streams: Sequence, default: str) -> str:
    return next((s.mime_type for s in streams if s.mime_type), default)


def _add_segment_base(
    representation: ET.Element, init_range: Optional[str], index_range: Optional[str]
) -> None:
    # Both ranges or nothing; a partial SegmentBase is never emitted
    if not init_range or not index_range:
        return
    segment_base = ET.SubElement(representation, "SegmentBase", {"indexRange": index_range})
    ET.SubElement(segment_base, "Initialization", {"range": init_range})


def _add_base_url(representation: ET.Element, url: str) -> None:
    base_url = ET.SubElement(representation, "BaseURL")
    base_url.text = url


def _representation_attributes(stream) -> Dict[str, str]:
    attributes = {"id": stream.id, "bandwidth": str(stream.bandwidth)}
    if stream.codec:
        attributes["codecs"] = stream.codec
    return attributes


def sort_video_streams(videos: Sequence[VideoRepresentation]) -> List[VideoRepresentation]:
    """Order video renditions by height, then bandwidth, both descending."""
    return sorted(videos, key=lambda v: (v.height, v.bandwidth), reverse=True)


def group_audio_by_language(
    audios: Sequence[AudioRepresentation],
) -> List[List[AudioRepresentation]]:
    """
    Group audio renditions by language.

    Returns:
        One group per language, "und" first and the rest in ascending order.
        Each group is sorted by bandwidth, highest first.
    """
    groups: Dict[str, List[AudioRepresentation]] = {}
    for audio in audios:
        groups.setdefault(audio.language or UNDEFINED_LANGUAGE, []).append(audio)

    languages = sorted(groups, key=lambda lang: (lang != UNDEFINED_LANGUAGE, lang))
    return [
        sorted(groups[lang], key=lambda a: a.bandwidth, reverse=True) for lang in languages
    ]


def _build_video_adaptation_set(
    period: ET.Element, videos: Sequence[VideoRepresentation]
) -> None:
    ordered = sort_video_streams(videos)

    adaptation_set = ET.SubElement(
        period,
        "AdaptationSet",
        {
            "id": str(VIDEO_ADAPTATION_SET_ID),
            "contentType": "video",
            "mimeType": _first_mime_type(ordered, DEFAULT_VIDEO_MIME_TYPE),
            "subsegmentAlignment": "true",
            "startWithSAP": "1",
        },
    )

    for video in ordered:
        attributes = _representation_attributes(video)
        attributes["width"] = str(video.width)
        attributes["height"] = str(video.height)
        if video.frame_rate:
            attributes["frameRate"] = video.frame_rate

        representation = ET.SubElement(adaptation_set, "Representation", attributes)
        _add_base_url(representation, video.url)
        _add_segment_base(representation, video.init_range, video.index_range)


def _build_audio_adaptation_sets(
    period: ET.Element, audios: Sequence[AudioRepresentation]
) -> None:
    for set_id, group in enumerate(group_audio_by_language(audios), FIRST_AUDIO_ADAPTATION_SET_ID):
        language = group[0].language or UNDEFINED_LANGUAGE
        label = group[0].language_name or get_language_name(language)

        adaptation_set = ET.SubElement(
            period,
            "AdaptationSet",
            {
                "id": str(set_id),
                "contentType": "audio",
                "mimeType": _first_mime_type(group, DEFAULT_AUDIO_MIME_TYPE),
                "lang": language,
                "label": label,
                "subsegmentAlignment": "true",
                "startWithSAP": "1",
            },
        )

        for audio in group:
            attributes = _representation_attributes(audio)
            if audio.audio_sampling_rate:
                attributes["audioSamplingRate"] = audio.audio_sampling_rate

            representation = ET.SubElement(adaptation_set, "Representation", attributes)
            ET.SubElement(
                representation,
                "AudioChannelConfiguration",
                {"schemeIdUri": AUDIO_CHANNEL_SCHEME, "value": str(audio.audio_channels)},
            )
            _add_base_url(representation, audio.url)
            _add_segment_base(representation, audio.init_range, audio.index_range)


def _build_subtitle_adaptation_sets(
    period: ET.Element, subtitles: Sequence[SubtitleRepresentation]
) -> None:
    for set_id, subtitle in enumerate(subtitles, FIRST_SUBTITLE_ADAPTATION_SET_ID):
        adaptation_set = ET.SubElement(
            period,
            "AdaptationSet",
            {
                "id": str(set_id),
                "contentType": "text",
                "lang": subtitle.language or UNDEFINED_LANGUAGE,
                "mimeType": subtitle.mime_type,
            },
        )
        # Auto-generated and human-authored tracks share the same role
        ET.SubElement(
            adaptation_set, "Role", {"schemeIdUri": ROLE_SCHEME, "value": SUBTITLE_ROLE}
        )

        representation = ET.SubElement(
            adaptation_set,
            "Representation",
            {"id": subtitle.id, "bandwidth": str(subtitle.bandwidth)},
        )
        _add_base_url(representation, subtitle.url)


def build_mpd(config: ManifestConfig) -> ET.Element:
    """
    Build the MPD element tree for a validated configuration.

    Args:
        config: Validated manifest configuration

    Returns:
        Root MPD element
    """
    mpd = ET.Element(
        "MPD",
        {
            "xmlns": DASH_NAMESPACE,
            "type": config.type,
            "mediaPresentationDuration": config.media_presentation_duration,
            "minBufferTime": config.min_buffer_time,
            "profiles": config.profiles,
        },
    )
    period = ET.SubElement(mpd, "Period", {"duration": config.media_presentation_duration})

    if config.video_streams:
        _build_video_adaptation_set(period, config.video_streams)
    if config.audio_streams:
        _build_audio_adaptation_sets(period, config.audio_streams)
    if config.subtitle_streams:
        _build_subtitle_adaptation_sets(period, config.subtitle_streams)

    return mpd


def generate_manifest_xml(config: Optional[ManifestConfig]) -> str:
    """
    Generate a complete DASH MPD document.

    Args:
        config: Manifest configuration

    Returns:
        UTF-8 XML document as a string

    Raises:
        InvalidManifestConfigError: If the configuration is invalid
    """
    config = validate_config(config)

    mpd = build_mpd(config)
    ET.indent(mpd, space=INDENT)

    return f"{XML_DECLARATION}\n{ET.tostring(mpd, encoding='unicode')}\n"
