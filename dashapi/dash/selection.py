"""Stream selection before manifest generation.

Players cope badly with dozens of near-identical renditions, so the manifest
advertises a bounded subset: a quality ladder of video renditions, one audio
track per language and one subtitle track per language.
"""

from typing import Dict, List, Sequence, Tuple

import structlog

from dashapi.dash.languages import UNDEFINED_LANGUAGE
from dashapi.dash.models import (
    DEFAULT_AUDIO_MIME_TYPE,
    AudioRepresentation,
    SubtitleRepresentation,
    VideoRepresentation,
)

logger = structlog.get_logger(__name__)

# Quality ladder by pixel height, highest first
QUALITY_LEVELS: Tuple[int, ...] = (2160, 1440, 1080, 720, 480, 360, 240, 144)

MIN_VIDEO_QUALITIES = 3
MAX_VIDEO_QUALITIES = 6

PREFERRED_SUBTITLE_FORMATS: Tuple[str, ...] = ("vtt", "srv3", "srv2", "srv1", "ttml")


def _quality_rank(video: VideoRepresentation) -> int:
    try:
        return QUALITY_LEVELS.index(video.height)
    except ValueError:
        return len(QUALITY_LEVELS)


def language_priority(language: str) -> Tuple[int, str]:
    """Sort key for languages: undefined first, then English, then alphabetical."""
    if language in (UNDEFINED_LANGUAGE, "original"):
        return (0, language)
    if language == "en":
        return (1, language)
    return (2, language)


def select_video_streams(videos: Sequence[VideoRepresentation]) -> List[VideoRepresentation]:
    """
    Select video renditions across the quality ladder.

    One rendition per ladder rung is kept (first in source order), up to
    MAX_VIDEO_QUALITIES. When fewer than MIN_VIDEO_QUALITIES rungs are present,
    the remaining renditions with the highest bandwidth fill the gap.

    Args:
        videos: Normalized video representations

    Returns:
        Selected representations ordered from highest to lowest quality
    """
    if not videos:
        logger.warning("No video streams available for selection")
        return []

    selected: List[VideoRepresentation] = []
    for height in QUALITY_LEVELS:
        match = next((v for v in videos if v.height == height), None)
        if match is not None:
            selected.append(match)
        if len(selected) >= MAX_VIDEO_QUALITIES:
            break

    if len(selected) < MIN_VIDEO_QUALITIES:
        selected_ids = {v.id for v in selected}
        remaining = sorted(
            (v for v in videos if v.id not in selected_ids),
            key=lambda v: v.bandwidth,
            reverse=True,
        )
        selected.extend(remaining[: MIN_VIDEO_QUALITIES - len(selected)])

    selected = sorted(selected, key=_quality_rank)

    logger.info("Selected video streams", selected=len(selected), available=len(videos))
    return selected


def _best_for_language(streams: Sequence[AudioRepresentation]) -> AudioRepresentation:
    mp4_streams = [s for s in streams if s.mime_type == DEFAULT_AUDIO_MIME_TYPE]
    candidates = mp4_streams or list(streams)
    return max(candidates, key=lambda s: s.bandwidth)


def select_audio_streams(audios: Sequence[AudioRepresentation]) -> List[AudioRepresentation]:
    """
    Select the best audio track for each language.

    Within a language the highest-bandwidth MP4/AAC track wins, falling back
    to the highest-bandwidth track of any container.

    Args:
        audios: Normalized audio representations

    Returns:
        One representation per language, undefined language first
    """
    if not audios:
        logger.warning("No audio streams available for selection")
        return []

    by_language: Dict[str, List[AudioRepresentation]] = {}
    for audio in audios:
        by_language.setdefault(audio.language, []).append(audio)

    selected = sorted(
        (_best_for_language(streams) for streams in by_language.values()),
        key=lambda a: language_priority(a.language),
    )

    logger.info(
        "Selected audio streams",
        selected=len(selected),
        languages=len(by_language),
        available=len(audios),
    )
    return selected


def _filter_by_format(
    subtitles: Sequence[SubtitleRepresentation],
) -> List[SubtitleRepresentation]:
    for preferred in PREFERRED_SUBTITLE_FORMATS:
        matching = [s for s in subtitles if (s.format or "").lower() == preferred]
        if matching:
            return matching
    return list(subtitles)


def select_subtitles(
    subtitles: Sequence[SubtitleRepresentation],
) -> List[SubtitleRepresentation]:
    """
    Select one subtitle track per language.

    Only the most preferred subtitle format present is kept. Human-authored
    tracks replace auto-generated ones for the same language.

    Args:
        subtitles: Normalized subtitle representations

    Returns:
        Deduplicated subtitles, undefined language first, then English,
        then alphabetical
    """
    if not subtitles:
        logger.info("No subtitles available for selection")
        return []

    by_language: Dict[str, SubtitleRepresentation] = {}
    for subtitle in _filter_by_format(subtitles):
        existing = by_language.get(subtitle.language)
        if existing is None or (existing.auto_generated and not subtitle.auto_generated):
            by_language[subtitle.language] = subtitle

    selected = sorted(
        by_language.values(),
        key=lambda s: (language_priority(s.language)[0], s.auto_generated, s.language),
    )

    logger.info("Selected subtitle streams", selected=len(selected), available=len(subtitles))
    return selected
