"""Service layer implementations."""

from dashapi.services.manifest_service import (
    DASH_CONTENT_TYPE,
    ManifestService,
    configure_manifest_service,
    get_manifest_service,
)

__all__ = [
    "DASH_CONTENT_TYPE",
    "ManifestService",
    "configure_manifest_service",
    "get_manifest_service",
]
