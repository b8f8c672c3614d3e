"""
File system utilities for mmock-setup.

This module provides the file operations the installer needs:
- Archive extraction (tar.gz, zip) selected by the asset suffix
- Safe file operations (safe deletion, recursive copy)
- Path utilities

Archive members are validated before extraction so that no member can be
written outside the destination directory.
"""

import os
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from mmock_setup.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

IS_WINDOWS = os.name == "nt"


class FilesystemError(Exception):
    """Base exception for filesystem operation errors."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether path is located under parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def archive_format(name: str) -> str:
    """
    Determine the archive format from a file name or URL.

    Args:
        name: Asset file name or download URL

    Returns:
        'tar.gz' or 'zip'

    Raises:
        UnsupportedArchiveFormat: If the suffix maps to no extractor
    """
    lowered = name.lower()
    if lowered.endswith("tar.gz"):
        return "tar.gz"
    if lowered.endswith("zip"):
        return "zip"
    raise UnsupportedArchiveFormat(f"Unsupported distributive format: {name}")


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    format_hint: Optional[str] = None,
) -> None:
    """
    Extract an archive to a destination directory.

    The format is taken from format_hint when given (the download URL is
    the usual hint, since temporary download names are opaque), otherwise
    from the archive's own file name.

    Supported formats:
    - .tar.gz
    - .zip

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        format_hint: File name or URL whose suffix selects the extractor

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('/tmp/dl-1234', '/tmp/mmock-3.1.6', 'mmock_Linux_x86_64.tar.gz')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    fmt = archive_format(format_hint or archive_path.name)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        if fmt == "zip":
            _extract_zip(archive_path, destination)
        else:
            _extract_tar_gz(archive_path, destination)
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, keeping Unix permission bits when present."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            extracted = zf.extract(member, destination)
            mode = (member.external_attr >> 16) & 0o777
            if mode and not IS_WINDOWS:
                os.chmod(extracted, mode)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    with tarfile.open(archive_path, "r:gz") as tar:
        members = tar.getmembers()

        for member in members:
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        # For older Python, we've already validated paths above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def remove_path(path: Union[str, Path]) -> None:
    """
    Remove a file or directory tree if it exists.

    Missing paths are ignored.

    Raises:
        FilesystemError: If deletion fails
    """
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as e:
        raise FilesystemError(f"Failed to remove '{path}': {e}") from e


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/tmp/cache/.staging-abc', require_prefix='/tmp/cache')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, merging into destination.

    Symlinks are copied as symlinks and file metadata (including the
    executable bit) is preserved.

    Example:
        >>> recursive_copy('/cache/mmock-cache-3.1.6-linux-x64', '/tmp/mmock-3.1.6')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)


def directory_size(path: Union[str, Path]) -> int:
    """Total size in bytes of all regular files under path."""
    return sum(f.stat().st_size for f in Path(path).rglob("*") if f.is_file())


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "archive_format",
    "extract_archive",
    "remove_path",
    "safe_rmtree",
    "recursive_copy",
    "directory_size",
]
