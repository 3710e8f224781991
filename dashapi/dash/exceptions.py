"""DASH manifest pipeline exceptions."""


class ManifestError(Exception):
    """Base exception for manifest pipeline errors."""

    pass


class InvalidManifestConfigError(ManifestError):
    """Raised when a manifest configuration fails validation.

    Always raised before any XML is built, so no partial document exists.
    """

    pass


class NormalizationError(ManifestError):
    """Raised when a single raw representation cannot be normalized."""

    pass
