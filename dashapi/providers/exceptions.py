"""Provider-specific exceptions."""


class ProviderError(Exception):
    """Base exception for provider errors."""

    pass


class InvalidURLError(ProviderError):
    """Raised when URL or video ID is invalid or unsupported."""

    pass


class VideoUnavailableError(ProviderError):
    """Raised when video is not accessible."""

    pass


class ExtractionError(ProviderError):
    """Raised when metadata extraction fails."""

    pass
