"""
Platform detection for mmock-setup.

This module detects the current platform key (operating system and CPU
architecture) used to pick the right mmock release asset and to build the
cache key.

Identifiers follow the naming used by the upstream release tooling:
- Operating systems: 'linux', 'darwin', 'win32'
- Architectures: 'x64', 'arm64', 'x32', 'arm' (anything else is passed through)

Usage:
    from mmock_setup.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"OS: {platform_info.os}")
    print(f"Architecture: {platform_info.arch}")
    print(f"Platform string: {platform_info.platform_string()}")
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform key of a runner.

    Attributes:
        os: Operating system ('linux', 'darwin', 'win32' or a raw lower-cased name)
        arch: CPU architecture ('x64', 'arm64', 'x32', 'arm' or a raw machine name)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'darwin-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected OS and architecture

    Example:
        >>> platform_info = detect_platform()
        >>> print(f"Running on {platform_info.platform_string()}")
        Running on linux-x64
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'linux', 'darwin', 'win32', or the lower-cased system name for
        anything else (the locator rejects those).
    """
    system = platform.system().lower()

    if system == "windows":
        return "win32"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "darwin"
    else:
        return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x32', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86", "x32"):
        return "x32"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # Return original for unknown architectures
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
