"""Stream API endpoints.

Every endpoint takes the same ``id`` query parameter (a YouTube video ID or
watch URL), extracts the video's stream info with yt-dlp and renders a
different view of it: the DASH manifest, the normalized rendition lists,
descriptive details or chapters.
"""

from typing import Any, Dict, List, Mapping

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from dashapi.api.schemas import (
    AudioStreamResponse,
    ErrorDetail,
    StreamDetailsResponse,
    StreamInfoResponse,
    StreamSegmentResponse,
    SubtitleStreamResponse,
    VideoStreamResponse,
)
from dashapi.core.errors import APIError, ErrorCode
from dashapi.core.validation import video_id_validator
from dashapi.dash.models import ManifestConfig
from dashapi.providers.manager import ProviderManager
from dashapi.services.manifest_service import DASH_CONTENT_TYPE, ManifestService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["streams"])

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorDetail, "description": "Invalid video ID or URL"},
    404: {"model": ErrorDetail, "description": "Video not available"},
    502: {"model": ErrorDetail, "description": "Extraction failed"},
}


# Dependency placeholders, overridden in create_app()
async def get_provider_manager() -> ProviderManager:
    """Get provider manager instance."""
    raise NotImplementedError("Provider manager dependency not configured")


async def get_manifest_service() -> ManifestService:
    """Get manifest service instance."""
    raise NotImplementedError("Manifest service dependency not configured")


def _require_valid_id(video_id: str) -> str:
    validation = video_id_validator.validate(video_id)
    if not validation.is_valid:
        raise APIError(ErrorCode.INVALID_URL, validation.error_message or "Invalid video ID")
    return validation.sanitized_value or video_id


async def _fetch_info(video_id: str, provider_manager: ProviderManager) -> Dict[str, Any]:
    return await provider_manager.get_stream_info(_require_valid_id(video_id))


def _stream_info_response(info: Mapping[str, Any], config: ManifestConfig) -> StreamInfoResponse:
    return StreamInfoResponse(
        video_id=str(info.get("id") or ""),
        title=info.get("title") or "",
        duration=config.duration_seconds,
        media_presentation_duration=config.media_presentation_duration,
        uploader=info.get("uploader") or "",
        video_streams=[VideoStreamResponse.model_validate(v) for v in config.video_streams or []],
        audio_streams=[AudioStreamResponse.model_validate(a) for a in config.audio_streams or []],
        subtitle_streams=[
            SubtitleStreamResponse.model_validate(s) for s in config.subtitle_streams or []
        ],
    )


def _details_response(info: Mapping[str, Any]) -> StreamDetailsResponse:
    return StreamDetailsResponse(
        video_id=str(info.get("id") or ""),
        title=info.get("title") or "",
        description=info.get("description") or "",
        uploader=info.get("uploader") or info.get("channel") or "",
        channel_id=info.get("channel_id"),
        channel_follower_count=info.get("channel_follower_count"),
        view_count=int(info.get("view_count") or 0),
        like_count=int(info.get("like_count") or 0),
        upload_date=info.get("upload_date") or "",
        thumbnail_url=info.get("thumbnail") or "",
        duration=int(info.get("duration") or 0),
    )


def _segments_response(info: Mapping[str, Any]) -> List[StreamSegmentResponse]:
    segments = []
    for chapter in info.get("chapters") or []:
        if not isinstance(chapter, Mapping) or chapter.get("start_time") is None:
            continue
        segments.append(
            StreamSegmentResponse(
                title=chapter.get("title") or "",
                start_time=float(chapter["start_time"]),
                end_time=(
                    float(chapter["end_time"]) if chapter.get("end_time") is not None else None
                ),
            )
        )
    return segments


@router.get(
    "/streams/dash",
    response_class=Response,
    responses={
        200: {"content": {DASH_CONTENT_TYPE: {}}, "description": "DASH MPD manifest"},
        422: {"model": ErrorDetail, "description": "Video cannot be described by a manifest"},
        **ERROR_RESPONSES,
    },
)
async def get_dash_manifest(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    manifest_service: ManifestService = Depends(get_manifest_service),  # noqa: B008
) -> Response:
    """
    Generate a DASH MPD manifest for adaptive playback.

    The manifest references the original media URLs directly; no media
    passes through this service.
    """
    logger.info("dash_manifest_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    manifest = manifest_service.generate_manifest(info)

    return Response(content=manifest, media_type=DASH_CONTENT_TYPE)


@router.get("/streams", response_model=StreamInfoResponse, responses=ERROR_RESPONSES)
async def get_stream_info(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    manifest_service: ManifestService = Depends(get_manifest_service),  # noqa: B008
) -> Any:
    """Get a stream summary with every normalized rendition."""
    logger.info("stream_info_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    config = manifest_service.normalize(info)

    return _stream_info_response(info, config)


@router.get(
    "/streams/video", response_model=List[VideoStreamResponse], responses=ERROR_RESPONSES
)
async def get_video_streams(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    manifest_service: ManifestService = Depends(get_manifest_service),  # noqa: B008
) -> Any:
    """List video-only renditions."""
    logger.info("video_streams_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    config = manifest_service.normalize(info)

    return [VideoStreamResponse.model_validate(v) for v in config.video_streams or []]


@router.get(
    "/streams/audio", response_model=List[AudioStreamResponse], responses=ERROR_RESPONSES
)
async def get_audio_streams(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    manifest_service: ManifestService = Depends(get_manifest_service),  # noqa: B008
) -> Any:
    """List audio-only renditions."""
    logger.info("audio_streams_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    config = manifest_service.normalize(info)

    return [AudioStreamResponse.model_validate(a) for a in config.audio_streams or []]


@router.get(
    "/streams/subtitles",
    response_model=List[SubtitleStreamResponse],
    responses=ERROR_RESPONSES,
)
async def get_subtitle_streams(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    manifest_service: ManifestService = Depends(get_manifest_service),  # noqa: B008
) -> Any:
    """List subtitle tracks, human-authored and auto-generated."""
    logger.info("subtitle_streams_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    config = manifest_service.normalize(info)

    return [SubtitleStreamResponse.model_validate(s) for s in config.subtitle_streams or []]


@router.get("/streams/details", response_model=StreamDetailsResponse, responses=ERROR_RESPONSES)
async def get_stream_details(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
) -> Any:
    """Get title, uploader, counters and upload date."""
    logger.info("stream_details_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    return _details_response(info)


@router.get(
    "/streams/segments",
    response_model=List[StreamSegmentResponse],
    responses=ERROR_RESPONSES,
)
async def get_stream_segments(
    video_id: str = Query(..., alias="id", description="YouTube video ID or URL"),  # noqa: B008
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
) -> Any:
    """List chapters. Videos without chapters return an empty list."""
    logger.info("stream_segments_requested", video_id=video_id)

    info = await _fetch_info(video_id, provider_manager)
    return _segments_response(info)
