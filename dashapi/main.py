"""FastAPI application entry point.

This module assembles all components and creates the main application.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashapi import __version__
from dashapi.api import health, streams
from dashapi.core.config import Config, ConfigService, ExtractorConfig, SecurityConfig
from dashapi.core.errors import APIError, global_exception_handler
from dashapi.core.logging import configure_logging
from dashapi.dash.exceptions import ManifestError
from dashapi.middleware.request_id import RequestIDMiddleware
from dashapi.providers.exceptions import ProviderError
from dashapi.providers.manager import ProviderManager
from dashapi.providers.youtube import YouTubeProvider
from dashapi.services.manifest_service import configure_manifest_service, get_manifest_service

logger = structlog.get_logger(__name__)


# Global service instances
_provider_manager: ProviderManager | None = None
_config: Config | None = None


def get_provider_manager() -> ProviderManager:
    """Get the global provider manager instance."""
    if _provider_manager is None:
        raise RuntimeError("Provider manager not configured")
    return _provider_manager


def get_extractor_config() -> ExtractorConfig:
    """Get the loaded extractor configuration."""
    if _config is None:
        raise RuntimeError("Configuration not loaded")
    return _config.extractor


def build_provider_manager(config: Config) -> ProviderManager:
    """Create a provider manager with the YouTube provider registered."""
    manager = ProviderManager()
    youtube_config = {
        "binary": config.extractor.binary,
        "player_client": config.extractor.player_client,
        "retry_attempts": config.extractor.retry_attempts,
        "retry_backoff": config.extractor.retry_backoff,
        "timeout": float(config.timeouts.metadata),
    }
    manager.register_provider("youtube", YouTubeProvider(youtube_config), default=True)
    return manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown."""
    global _provider_manager, _config

    config_service = ConfigService()
    config = config_service.load()
    config_service.validate()
    _config = config

    configure_logging(config.logging.level, config.logging.format)

    logger.info("Application starting", version=__version__)
    logger.info(
        "Configuration loaded",
        server_port=config.server.port,
        extractor=config.extractor.binary,
        select_streams=config.manifest.select_streams,
    )

    configure_manifest_service(
        select_streams=config.manifest.select_streams,
        min_buffer_time=config.manifest.min_buffer_time,
    )
    logger.info("Manifest service configured")

    _provider_manager = build_provider_manager(config)

    logger.info("Application startup complete", version=__version__)

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="YT DASH API",
        description="DASH manifests and stream metadata for YouTube videos using yt-dlp",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Default ["*"] for development; override via APP_SECURITY_CORS_ORIGINS env var
    security_config = SecurityConfig()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=security_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(RequestIDMiddleware)

    # Register global exception handlers
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(APIError, global_exception_handler)
    app.add_exception_handler(ProviderError, global_exception_handler)
    app.add_exception_handler(ManifestError, global_exception_handler)

    # Override dependency injection for routers
    app.dependency_overrides[streams.get_provider_manager] = get_provider_manager
    app.dependency_overrides[streams.get_manifest_service] = get_manifest_service
    app.dependency_overrides[health.get_provider_manager] = get_provider_manager
    app.dependency_overrides[health.get_extractor_config] = get_extractor_config

    app.include_router(health.router)
    app.include_router(streams.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn  # type: ignore[import-not-found]

    uvicorn.run(app, host="0.0.0.0", port=8000)  # nosec B104
