"""
Cache-first installation of mmock.

This module orchestrates one install:
1. Compute the install directory and cache key from version and platform
2. Try to restore the install directory from the cache store
3. On a miss, locate the release asset, download it, extract it by suffix,
   remove the archive and save the directory back to the cache store
4. Register the install directory on the search path

Cache-store failures on restore or save are logged as warnings and never
fail the install. Every other failure propagates; nothing is rolled back
and the search path is only touched once the directory is populated.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from mmock_setup.core.cache_store import CacheStore
from mmock_setup.core.download import DownloadProgress, download_tool
from mmock_setup.core.exceptions import CacheBackendError
from mmock_setup.core.filesystem import extract_archive, remove_path
from mmock_setup.core.platform import PlatformInfo, detect_platform
from mmock_setup.core.workflow import WorkflowContext
from mmock_setup.mmock.locator import locate

logger = logging.getLogger(__name__)


class CacheStatus(Enum):
    """Outcome of a cache restore attempt."""

    HIT = "hit"  # Entry restored into the install directory
    MISS = "miss"  # No entry for the key
    ERROR = "error"  # Cache store failed; handled like a miss


@dataclass
class InstallResult:
    """Result of an install operation."""

    version: str
    """Concrete version that was installed"""

    install_dir: Path
    """Directory registered on the search path"""

    cache_key: str
    """Key the install directory is cached under"""

    cache_status: CacheStatus
    """Outcome of the cache restore attempt"""

    cache_saved: bool = False
    """Whether a new cache entry was written by this run"""

    download_url: Optional[str] = None
    """Asset URL, None when restored from cache"""

    @property
    def was_cached(self) -> bool:
        return self.cache_status is CacheStatus.HIT


def make_cache_key(version: str, platform: PlatformInfo) -> str:
    """
    Cache key for a version on a platform.

    Example:
        >>> make_cache_key("3.1.6", PlatformInfo("linux", "x64"))
        'mmock-cache-3.1.6-linux-x64'
    """
    return f"mmock-cache-{version}-{platform.os}-{platform.arch}"


def make_install_dir(temp_root: Path, version: str) -> Path:
    """Install directory of a version under temp_root."""
    return Path(temp_root) / f"mmock-{version}"


class MMockInstaller:
    """
    Installs a concrete mmock version, reusing cached installs.

    Example:
        >>> installer = MMockInstaller(WorkflowContext(), CacheStore(), Path("/tmp"))
        >>> result = installer.install("3.1.6")
        >>> print(f"Installed at: {result.install_dir}")
    """

    def __init__(
        self,
        context: WorkflowContext,
        cache_store: CacheStore,
        temp_dir: Path,
        platform: Optional[PlatformInfo] = None,
        downloader: Callable[..., Path] = download_tool,
    ):
        """
        Initialize installer.

        Args:
            context: Workflow context used for search-path registration
            cache_store: Persistent cache store
            temp_dir: Root for install and download directories
            platform: Target platform (auto-detected if None)
            downloader: Callable(url, temp_dir, progress_callback=...) -> archive path
        """
        self.context = context
        self.cache_store = cache_store
        self.temp_dir = Path(temp_dir)
        self.platform = platform or detect_platform()
        self.downloader = downloader

    def install(self, version: str) -> InstallResult:
        """
        Install version and put it on the search path.

        Args:
            version: Concrete version (e.g. '3.1.6')

        Returns:
            InstallResult describing what happened

        Raises:
            UnsupportedPlatformError: If no asset exists for this platform
            DownloadError: If the asset download fails
            ArchiveExtractionError: If the archive cannot be extracted
        """
        install_dir = make_install_dir(self.temp_dir, version)
        cache_key = make_cache_key(version, self.platform)

        logger.info(f"Version to install: {version} (target directory: {install_dir})")

        result = InstallResult(
            version=version,
            install_dir=install_dir,
            cache_key=cache_key,
            cache_status=self._restore(install_dir, cache_key),
        )

        if result.was_cached:
            logger.info("👌 MMock restored from cache")
        else:
            result.download_url = self._download_and_extract(version, install_dir)
            result.cache_saved = self._save(install_dir, cache_key)

        self.context.add_path(install_dir)

        return result

    def _restore(self, install_dir: Path, cache_key: str) -> CacheStatus:
        try:
            hit = self.cache_store.restore(install_dir, cache_key)
        except CacheBackendError as e:
            logger.warning(str(e))
            return CacheStatus.ERROR

        return CacheStatus.HIT if hit else CacheStatus.MISS

    def _save(self, install_dir: Path, cache_key: str) -> bool:
        try:
            return self.cache_store.save(install_dir, cache_key)
        except CacheBackendError as e:
            logger.warning(str(e))
            return False

    def _download_and_extract(self, version: str, install_dir: Path) -> str:
        """
        Download the release asset and extract it into install_dir.

        Returns:
            The asset URL
        """
        dist_url = locate(self.platform.os, self.platform.arch, version)

        logger.debug(f"Downloading mmock from {dist_url}")

        def on_progress(progress: DownloadProgress):
            logger.debug(str(progress))

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        dist_path = self.downloader(dist_url, self.temp_dir, progress_callback=on_progress)

        extract_archive(dist_path, install_dir, format_hint=dist_url)

        remove_path(dist_path)

        return dist_url
