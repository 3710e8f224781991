"""Input validation utilities for the API layer.

The streams endpoints accept either a bare YouTube video ID or a full
watch URL in their ``id`` parameter. Both forms are checked here before
the extractor is ever invoked.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Set
from urllib.parse import urlparse

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[str] = None


class URLValidator:
    """Validates URLs against an allowed domain whitelist."""

    DEFAULT_ALLOWED_DOMAINS: FrozenSet[str] = frozenset(
        {
            "youtube.com",
            "www.youtube.com",
            "m.youtube.com",
            "youtu.be",
        }
    )

    # Dangerous URL schemes that should always be rejected
    DANGEROUS_SCHEMES: FrozenSet[str] = frozenset(
        {
            "javascript",
            "data",
            "file",
            "vbscript",
            "about",
        }
    )

    def __init__(self, allowed_domains: Optional[Set[str]] = None):
        self.allowed_domains = allowed_domains or self.DEFAULT_ALLOWED_DOMAINS

    def validate(self, url: str) -> ValidationResult:
        """Validate a URL against the whitelist.

        Args:
            url: URL to validate

        Returns:
            ValidationResult with validation status and any error message
        """
        if not url or not isinstance(url, str):
            return ValidationResult(
                is_valid=False, error_message="URL is required and must be a string"
            )

        url = url.strip()
        if not url:
            return ValidationResult(is_valid=False, error_message="URL cannot be empty")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            logger.warning("URL parsing failed", url=url, error=str(e))
            return ValidationResult(is_valid=False, error_message="Invalid URL format")

        scheme = parsed.scheme.lower() if parsed.scheme else ""
        if scheme in self.DANGEROUS_SCHEMES:
            logger.warning("Dangerous URL scheme detected", url=url, scheme=scheme)
            return ValidationResult(
                is_valid=False, error_message=f"URL scheme '{scheme}' is not allowed"
            )

        if scheme not in ("http", "https", ""):
            return ValidationResult(
                is_valid=False, error_message="URL must use http or https scheme"
            )

        netloc = parsed.netloc.lower()
        if not netloc:
            # "youtube.com/watch?v=xxx" parses with the domain in the path
            potential_domain = parsed.path.split("/")[0].lower()
            if potential_domain and "." in potential_domain:
                netloc = potential_domain

        if not netloc:
            return ValidationResult(is_valid=False, error_message="URL must include a valid domain")

        domain = netloc.split(":")[0]

        if domain not in self.allowed_domains:
            logger.debug("Domain not in whitelist", url=url, domain=domain)
            return ValidationResult(
                is_valid=False,
                error_message=f"Domain '{domain}' is not in the allowed list",
            )

        logger.debug("URL validated successfully", url=url, domain=domain)
        return ValidationResult(is_valid=True, sanitized_value=url)

    def is_valid(self, url: str) -> bool:
        return self.validate(url).is_valid


class VideoIdValidator:
    """Validates bare YouTube video IDs or watch URLs."""

    VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

    def __init__(self, url_validator: Optional[URLValidator] = None):
        self.url_validator = url_validator or URLValidator()

    def validate(self, value: str) -> ValidationResult:
        """
        Validate a video reference.

        Args:
            value: 11-character video ID or a YouTube URL

        Returns:
            ValidationResult whose sanitized_value is the stripped reference
        """
        if not value or not isinstance(value, str):
            return ValidationResult(is_valid=False, error_message="Video ID is required")

        value = value.strip()

        if "/" in value or "." in value:
            return self.url_validator.validate(value)

        if not self.VIDEO_ID_PATTERN.match(value):
            return ValidationResult(
                is_valid=False,
                error_message=(
                    "Invalid video ID. Expected 11 characters of letters, digits, '-' or '_'"
                ),
            )

        return ValidationResult(is_valid=True, sanitized_value=value)


video_id_validator = VideoIdValidator()


def validate_video_id(value: str) -> bool:
    """Convenience check for a video ID or URL."""
    return video_id_validator.validate(value).is_valid
