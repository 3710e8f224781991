"""Tests for API endpoints."""

import xml.etree.ElementTree as ET
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dashapi.api import health, streams
from dashapi.core.checks import CheckResult
from dashapi.core.config import ExtractorConfig
from dashapi.core.errors import APIError, global_exception_handler
from dashapi.dash.exceptions import ManifestError
from dashapi.providers.exceptions import (
    ExtractionError,
    InvalidURLError,
    ProviderError,
    VideoUnavailableError,
)
from dashapi.providers.manager import ProviderManager
from dashapi.services.manifest_service import ManifestService
from dashapi.testing import get_demo_video

NS = {"mpd": "urn:mpeg:dash:schema:mpd:2011"}

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_provider_manager() -> MagicMock:
    """Create a mock provider manager returning demo stream info."""
    manager = MagicMock(spec=ProviderManager)
    manager.get_stream_info = AsyncMock(side_effect=get_demo_video)
    manager.list_providers.return_value = {"youtube": True}
    return manager


@pytest.fixture
def app(mock_provider_manager: MagicMock) -> FastAPI:
    """Create a test FastAPI application."""
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(streams.router)

    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(APIError, global_exception_handler)
    app.add_exception_handler(ProviderError, global_exception_handler)
    app.add_exception_handler(ManifestError, global_exception_handler)

    async def provider_manager() -> ProviderManager:
        return mock_provider_manager

    async def manifest_service() -> ManifestService:
        return ManifestService()

    app.dependency_overrides[streams.get_provider_manager] = provider_manager
    app.dependency_overrides[streams.get_manifest_service] = manifest_service
    app.dependency_overrides[health.get_provider_manager] = provider_manager

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# ============================================================================
# DASH manifest endpoint
# ============================================================================


class TestDashEndpoint:
    def test_returns_manifest(self, client: TestClient, mock_provider_manager: MagicMock) -> None:
        response = client.get("/api/v1/streams/dash", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/dash+xml")
        root = ET.fromstring(response.content)
        assert root.get("mediaPresentationDuration") == "PT3M32S"
        mock_provider_manager.get_stream_info.assert_awaited_once_with("dQw4w9WgXcQ")

    def test_selection_applied(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/dash", params={"id": "dQw4w9WgXcQ"})

        root = ET.fromstring(response.content)
        video_reps = root.findall(
            ".//mpd:AdaptationSet[@contentType='video']/mpd:Representation", NS
        )
        heights = [r.get("height") for r in video_reps]
        assert heights == ["1080", "720", "480", "360", "240", "144"]

        audio_sets = root.findall(".//mpd:AdaptationSet[@contentType='audio']", NS)
        assert len(audio_sets) == 1
        assert len(audio_sets[0].findall("mpd:Representation", NS)) == 1

        text_sets = root.findall(".//mpd:AdaptationSet[@contentType='text']", NS)
        assert [s.get("lang") for s in text_sets] == ["en", "es", "de"]

    def test_zero_duration_is_422(
        self, client: TestClient, mock_provider_manager: MagicMock
    ) -> None:
        info = get_demo_video("dQw4w9WgXcQ")
        info["duration"] = None
        mock_provider_manager.get_stream_info = AsyncMock(return_value=info)

        response = client.get("/api/v1/streams/dash", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_MANIFEST_CONFIG"

    def test_url_accepted(self, client: TestClient, mock_provider_manager: MagicMock) -> None:
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        mock_provider_manager.get_stream_info = AsyncMock(
            return_value=get_demo_video("dQw4w9WgXcQ")
        )

        response = client.get("/api/v1/streams/dash", params={"id": url})

        assert response.status_code == 200
        mock_provider_manager.get_stream_info.assert_awaited_once_with(url)


# ============================================================================
# Validation and error mapping
# ============================================================================


class TestErrors:
    @pytest.mark.parametrize(
        "video_id",
        ["short", "dQw4w9WgXcQ-too-long", "bad id here", "https://vimeo.com/12345"],
    )
    def test_invalid_id_is_400(
        self, client: TestClient, mock_provider_manager: MagicMock, video_id: str
    ) -> None:
        response = client.get("/api/v1/streams/dash", params={"id": video_id})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_URL"
        mock_provider_manager.get_stream_info.assert_not_called()

    def test_missing_id_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/dash")
        assert response.status_code == 422

    @pytest.mark.parametrize(
        "exc,status_code,error_code",
        [
            (InvalidURLError("bad"), 400, "INVALID_URL"),
            (VideoUnavailableError("Video is not accessible"), 404, "VIDEO_UNAVAILABLE"),
            (ExtractionError("Failed after 3 attempts"), 502, "EXTRACTION_FAILED"),
            (ProviderError("boom"), 500, "PROVIDER_ERROR"),
        ],
    )
    def test_provider_errors(
        self,
        client: TestClient,
        mock_provider_manager: MagicMock,
        exc: Exception,
        status_code: int,
        error_code: str,
    ) -> None:
        mock_provider_manager.get_stream_info = AsyncMock(side_effect=exc)

        response = client.get("/api/v1/streams", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == status_code
        body = response.json()
        assert body["error_code"] == error_code
        assert body["message"] == str(exc)
        assert "suggestion" in body
        assert "timestamp" in body


# ============================================================================
# JSON stream endpoints
# ============================================================================


class TestStreamEndpoints:
    def test_stream_info(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        data = response.json()
        assert data["video_id"] == "dQw4w9WgXcQ"
        assert data["duration"] == 212
        assert data["media_presentation_duration"] == "PT3M32S"
        assert len(data["video_streams"]) == 7
        assert len(data["audio_streams"]) == 3
        assert len(data["subtitle_streams"]) == 5

    def test_video_streams(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/video", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        data = response.json()
        assert data[0]["id"] == "video-1"
        assert data[0]["height"] == 144
        assert data[0]["bandwidth"] == 110000
        assert data[0]["init_range"] == "0-740"

    def test_audio_streams(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/audio", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        data = response.json()
        assert [a["mime_type"] for a in data] == ["audio/mp4", "audio/mp4", "audio/webm"]
        assert data[1]["language"] == "en"
        assert data[1]["language_name"] == "English"

    def test_subtitle_streams(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/subtitles", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        data = response.json()
        auto = [s["language"] for s in data if s["auto_generated"]]
        assert auto == ["en", "de"]
        assert all(s["language"] != "live_chat" for s in data)

    def test_details(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/details", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"].startswith("Rick Astley")
        assert data["uploader"] == "Rick Astley"
        assert data["view_count"] == 1500000000
        assert data["upload_date"] == "20091025"
        assert data["channel_follower_count"] == 4100000

    def test_segments(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/segments", params={"id": "dQw4w9WgXcQ"})

        assert response.status_code == 200
        assert response.json() == [
            {"title": "Intro", "start_time": 0.0, "end_time": 18.0},
            {"title": "Verse 1", "start_time": 18.0, "end_time": 43.0},
            {"title": "Chorus", "start_time": 43.0, "end_time": 212.0},
        ]

    def test_segments_without_chapters(self, client: TestClient) -> None:
        response = client.get("/api/v1/streams/segments", params={"id": "jNQXAC9IVRw"})

        assert response.status_code == 200
        assert response.json() == []


# ============================================================================
# Health endpoints
# ============================================================================


class TestHealthEndpoints:
    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/liveness")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_health_healthy(self, client: TestClient) -> None:
        result = CheckResult(name="ytdlp", available=True, version="2024.12.13")
        with patch("dashapi.api.health.check_ytdlp", new=AsyncMock(return_value=result)):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["ytdlp"]["version"] == "2024.12.13"
        assert data["components"]["providers"]["details"] == {"youtube": True}

    def test_health_unhealthy_without_ytdlp(self, client: TestClient) -> None:
        result = CheckResult(name="ytdlp", available=False, error="yt-dlp not found")
        with patch("dashapi.api.health.check_ytdlp", new=AsyncMock(return_value=result)):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["components"]["ytdlp"]["status"] == "unhealthy"

    def test_health_uses_configured_binary(self, app: FastAPI, client: TestClient) -> None:
        async def extractor_config() -> ExtractorConfig:
            return ExtractorConfig(binary="/opt/yt-dlp")

        app.dependency_overrides[health.get_extractor_config] = extractor_config
        result = CheckResult(name="ytdlp", available=True, version="2024.12.13")
        mock_check = AsyncMock(return_value=result)

        with patch("dashapi.api.health.check_ytdlp", new=mock_check):
            client.get("/readiness")

        mock_check.assert_awaited_once_with(binary="/opt/yt-dlp")

    def test_readiness_not_ready(self, client: TestClient) -> None:
        result = CheckResult(name="ytdlp", available=False, error="yt-dlp not found")
        with patch("dashapi.api.health.check_ytdlp", new=AsyncMock(return_value=result)):
            response = client.get("/readiness")

        assert response.status_code == 503
        assert response.json()["ready"] is False
