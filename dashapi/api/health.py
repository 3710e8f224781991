"""Health check endpoints.

- /health: yt-dlp availability plus registered providers
- /liveness: process is up
- /readiness: ready to serve manifest requests
"""

import time
from datetime import datetime, timezone
from typing import Literal

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from dashapi import __version__
from dashapi.api.schemas import ComponentHealth, HealthResponse, LivenessResponse, ReadinessResponse
from dashapi.core.checks import check_ytdlp
from dashapi.core.config import ExtractorConfig
from dashapi.providers.manager import ProviderManager

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])

# Track application start time for uptime calculation
_start_time: float = time.time()


def reset_start_time() -> None:
    """Reset the start time (for testing)."""
    global _start_time
    _start_time = time.time()


# Dependency placeholders, overridden in create_app()
async def get_provider_manager() -> ProviderManager:
    """Get provider manager instance."""
    raise NotImplementedError("Provider manager dependency not configured")


async def get_extractor_config() -> ExtractorConfig:
    """Get extractor configuration."""
    return ExtractorConfig()


async def _check_ytdlp(binary: str) -> ComponentHealth:
    result = await check_ytdlp(binary=binary)
    if result.available:
        return ComponentHealth(status="healthy", version=result.version)
    return ComponentHealth(
        status="unhealthy",
        details={"error": result.error or "yt-dlp not available"},
    )


def _check_providers(provider_manager: ProviderManager) -> ComponentHealth:
    providers = provider_manager.list_providers()
    if any(providers.values()):
        return ComponentHealth(status="healthy", details=providers)
    return ComponentHealth(
        status="unhealthy",
        details={"error": "No enabled providers", "providers": providers},
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All components healthy"},
        503: {"description": "One or more components unhealthy"},
    },
)
async def health_check(
    provider_manager: ProviderManager = Depends(get_provider_manager),  # noqa: B008
    extractor_config: ExtractorConfig = Depends(get_extractor_config),  # noqa: B008
) -> JSONResponse:
    """
    Detailed health check endpoint.

    Returns HTTP 200 if yt-dlp runs and at least one provider is enabled,
    HTTP 503 otherwise.
    """
    components = {
        "ytdlp": await _check_ytdlp(extractor_config.binary),
        "providers": _check_providers(provider_manager),
    }

    all_healthy = all(c.status == "healthy" for c in components.values())
    overall_status: Literal["healthy", "unhealthy"] = "healthy" if all_healthy else "unhealthy"

    response = HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
        components=components,
    )

    status_code = status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info(
        "health_check_completed",
        status=overall_status,
        components={k: v.status for k, v in components.items()},
    )

    return JSONResponse(content=response.model_dump(), status_code=status_code)


@router.get("/liveness", response_model=LivenessResponse)
async def liveness_check() -> LivenessResponse:
    """Liveness probe endpoint. Returns HTTP 200 while the process is alive."""
    return LivenessResponse(status="alive")


@router.get(
    "/readiness",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready to accept traffic"},
        503: {"description": "Service is not ready"},
    },
)
async def readiness_check(
    extractor_config: ExtractorConfig = Depends(get_extractor_config),  # noqa: B008
) -> JSONResponse:
    """Readiness probe endpoint. Requires a runnable yt-dlp."""
    ytdlp_health = await _check_ytdlp(extractor_config.binary)

    if ytdlp_health.status != "healthy":
        response = ReadinessResponse(status="not_ready", ready=False, message="yt-dlp not available")
        return JSONResponse(
            content=response.model_dump(),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return JSONResponse(
        content=ReadinessResponse(status="ready", ready=True).model_dump(),
        status_code=status.HTTP_200_OK,
    )
