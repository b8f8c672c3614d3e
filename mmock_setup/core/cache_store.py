"""
Persistent, key-addressed cache for installed mmock directories.

The store keeps one immutable entry per cache key under its root directory:

    <root>/
        <cache-key>/      : copy of a populated install directory
        lock/<key>.lock   : per-key file lock

Restoring copies an entry back into the install directory; saving stages a
copy next to the entries and renames it into place, so a reader never sees
a half-written entry.
"""

import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from mmock_setup.core.exceptions import CacheBackendError
from mmock_setup.core.filesystem import (
    FilesystemError,
    directory_size,
    recursive_copy,
    safe_rmtree,
)

logger = logging.getLogger(__name__)

CACHE_DIR_ENV = "MMOCK_SETUP_CACHE_DIR"


def get_default_cache_dir() -> Path:
    """
    Get the default cache root.

    Returns:
        $MMOCK_SETUP_CACHE_DIR if set, else ~/.mmock-setup/cache
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".mmock-setup" / "cache"


class CacheStore:
    """
    Directory-backed cache store with per-key file locking.

    Example:
        >>> store = CacheStore(Path("/var/cache/mmock-setup"))
        >>> store.save(Path("/tmp/mmock-3.1.6"), "mmock-cache-3.1.6-linux-x64")
        True
        >>> store.restore(Path("/tmp/mmock-3.1.6"), "mmock-cache-3.1.6-linux-x64")
        True
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 30):
        """
        Initialize cache store.

        Args:
            root: Cache root directory (default: get_default_cache_dir())
            lock_timeout: Timeout in seconds for acquiring an entry lock
        """
        self.root = Path(root) if root is not None else get_default_cache_dir()
        self.lock_dir = self.root / "lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized cache store at {self.root}")

    def entry_path(self, key: str) -> Path:
        """Directory holding the entry for key."""
        _validate_key(key)
        return self.root / key

    def has_entry(self, key: str) -> bool:
        return self.entry_path(key).is_dir()

    @contextmanager
    def _lock(self, key: str):
        """
        Hold the file lock of one cache key.

        Raises:
            CacheBackendError: If lock cannot be acquired within timeout
        """
        try:
            self.lock_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheBackendError(f"Cannot create cache lock directory: {e}") from e

        lock = FileLock(str(self.lock_dir / f"{key}.lock"), timeout=self.lock_timeout)

        try:
            with lock:
                logger.debug(f"Acquired cache lock for {key}")
                yield
            logger.debug(f"Released cache lock for {key}")
        except Timeout as e:
            raise CacheBackendError(
                f"Could not acquire cache lock for {key} within {self.lock_timeout} seconds"
            ) from e

    def restore(self, path: Path, key: str) -> bool:
        """
        Restore the entry for key into path.

        Args:
            path: Install directory to populate
            key: Cache key

        Returns:
            True on a cache hit, False when no entry exists for key

        Raises:
            CacheBackendError: If the store cannot be read
        """
        entry = self.entry_path(key)

        with self._lock(key):
            if not self.has_entry(key):
                logger.debug(f"Cache entry not found: {key}")
                return False

            try:
                recursive_copy(entry, path)
            except (OSError, FilesystemError) as e:
                raise CacheBackendError(f"Failed to restore cache entry {key}: {e}") from e

        logger.debug(f"Restored cache entry {key} into {path}")
        return True

    def save(self, path: Path, key: str) -> bool:
        """
        Save path as the entry for key.

        Entries are immutable: saving a key that already exists is a no-op.

        Args:
            path: Populated install directory
            key: Cache key

        Returns:
            True if a new entry was written, False if the key already existed

        Raises:
            CacheBackendError: If the store cannot be written
        """
        path = Path(path)
        if not path.is_dir():
            raise CacheBackendError(f"Path validation failed: {path} is not a directory")

        entry = self.entry_path(key)
        staging = self.root / f".staging-{key}-{uuid.uuid4().hex[:8]}"

        with self._lock(key):
            if self.has_entry(key):
                logger.info(f"Cache entry {key} already exists, not saving")
                return False

            try:
                recursive_copy(path, staging)
                staging.rename(entry)
            except (OSError, FilesystemError) as e:
                self._discard_staging(staging)
                raise CacheBackendError(f"Failed to save cache entry {key}: {e}") from e

        size_mb = directory_size(entry) / (1024 * 1024)
        logger.info(f"Cache saved with key: {key} ({size_mb:.1f} MB)")
        return True

    def _discard_staging(self, staging: Path) -> None:
        try:
            safe_rmtree(staging, require_prefix=self.root)
        except (ValueError, FilesystemError) as e:
            logger.warning(f"Failed to remove cache staging directory {staging}: {e}")


def _validate_key(key: str) -> None:
    if not key or "/" in key or "\\" in key or key.startswith("."):
        raise CacheBackendError(f"Invalid cache key: {key!r}")


__all__ = ["CacheStore", "CACHE_DIR_ENV", "get_default_cache_dir"]
