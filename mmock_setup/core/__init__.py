"""
Core functionality for mmock-setup.

This package contains the foundational modules the mmock installer depends on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .cache_store import CacheStore, get_default_cache_dir

from .workflow import WorkflowContext, configure_logging

from .exceptions import (
    MMockSetupError,
    InputError,
    ResolutionError,
    InvalidVersionError,
    UnsupportedPlatformError,
    DownloadError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    CacheBackendError,
    VerificationError,
    BinaryNotFoundError,
    BannerMismatchError,
)

__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "CacheStore",
    "get_default_cache_dir",
    "WorkflowContext",
    "configure_logging",
    "MMockSetupError",
    "InputError",
    "ResolutionError",
    "InvalidVersionError",
    "UnsupportedPlatformError",
    "DownloadError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "CacheBackendError",
    "VerificationError",
    "BinaryNotFoundError",
    "BannerMismatchError",
]
