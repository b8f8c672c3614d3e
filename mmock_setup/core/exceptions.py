"""
Centralized exception hierarchy for mmock-setup.

Every failure the action can report is one of these classes. Only
CacheBackendError is ever downgraded to a warning; the rest propagate to
the top-level runner and fail the run.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class MMockSetupError(Exception):
    """Base exception for all mmock-setup errors."""

    pass


class InputError(MMockSetupError):
    """Raised when a required action input is missing or invalid."""

    def __init__(self, name: str, message: str = ""):
        self.name = name
        super().__init__(message or f"Input required and not supplied: {name}")


# ============================================================================
# Resolution and Location Exceptions
# ============================================================================


class ResolutionError(MMockSetupError):
    """Raised when the latest release cannot be resolved."""

    pass


class InvalidVersionError(MMockSetupError):
    """Raised when a version string cannot be ordered semantically."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Invalid version: {version}")


class UnsupportedPlatformError(MMockSetupError):
    """Raised when no release asset exists for an OS/architecture/version."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class DownloadError(MMockSetupError):
    """Raised when the release asset cannot be downloaded."""

    pass


class ArchiveExtractionError(MMockSetupError):
    """Raised when archive extraction fails."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Raised when the asset suffix maps to no extractor."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Raised when an archive member escapes the destination directory."""

    pass


class CacheBackendError(MMockSetupError):
    """Raised when the cache store itself fails (not a plain cache miss)."""

    pass


# ============================================================================
# Verification Exceptions
# ============================================================================


class VerificationError(MMockSetupError):
    """Base exception for install verification failures."""

    pass


class BinaryNotFoundError(VerificationError):
    """Raised when the binary is not on the search path."""

    def __init__(self, binary_name: str):
        self.binary_name = binary_name
        super().__init__(f"{binary_name} binary file not found in $PATH")


class BannerMismatchError(VerificationError):
    """Raised when the binary output lacks the expected version banner."""

    def __init__(self, expected: str, output: str):
        self.expected = expected
        self.output = output
        super().__init__(
            f"The output does not contain the required substring: {output}"
        )
